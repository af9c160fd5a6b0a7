"""Reading course rosters from CSV and Excel files."""

import logging
import pathlib
import re
import typing

import pandas as pd

from ..roster import RosterImportRow, reconcile
from ..reports import ImportSummary, summarize
from .. import audit

logger = logging.getLogger(__name__)

_HEADER_ALIASES = {
    "student number": "student_id",
    "student no": "student_id",
    "student id": "student_id",
    "full name": "full_name",
    "name": "full_name",
    "first name": "first_name",
    "last name": "last_name",
    "middle initial": "middle_initial",
    "mi": "middle_initial",
}


def _standardize_header(column) -> str:
    key = re.sub(r"[\s_.]+", " ", str(column)).strip().lower()
    return _HEADER_ALIASES.get(key, key)


def _read_table(path, sheet_name=0) -> pd.DataFrame:
    """Read a CSV or Excel file as a table of (trimmed) strings."""
    path = pathlib.Path(path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        table = pd.read_csv(path, dtype=str, keep_default_na=False)
    elif suffix in {".xlsx", ".xlsm", ".xls"}:
        table = pd.read_excel(path, sheet_name=sheet_name, dtype=str).fillna("")
    else:
        raise ValueError(f"Unsupported file type: {path.suffix!r}.")

    table.columns = [_standardize_header(c) for c in table.columns]
    return table.apply(lambda column: column.str.strip())


def parse_full_name(full_name: str) -> typing.Optional[tuple]:
    """Split a name written as ``"Last, First M."``.

    Everything after the comma is the first name, except that a final word
    of at most two letters (ignoring a trailing period) is taken as the
    middle initial. Compound first names are kept whole, but a short final
    word such as in ``"Lee, Jo Bo"`` is read as an initial.

    Returns
    -------
    Optional[tuple[str, str, Optional[str]]]
        The last name, first name and middle initial (without the period, or
        `None` if absent). `None` if the text is not in that form.

    Example
    -------
    >>> parse_full_name("Dela Cruz, Juan A.")
    ('Dela Cruz', 'Juan', 'A')

    """
    parts = [p.strip() for p in full_name.split(",")]
    if len(parts) < 2 or not parts[0]:
        return None

    tokens = parts[1].split()
    if not tokens:
        return None

    middle_initial = None
    if len(tokens) > 1 and len(tokens[-1].rstrip(".")) <= 2:
        middle_initial = tokens[-1].rstrip(".") or None
        tokens = tokens[:-1]

    return parts[0], " ".join(tokens), middle_initial


def _row_from_record(record: dict) -> RosterImportRow:
    student_id = record.get("student_id") or None

    if "full_name" in record and not record.get("first_name"):
        parsed = parse_full_name(record["full_name"] or "")
        if parsed is None:
            return RosterImportRow(student_id, None, None)
        last, first, middle = parsed
        return RosterImportRow(student_id, first, last, middle)

    return RosterImportRow(
        student_id,
        record.get("first_name") or None,
        record.get("last_name") or None,
        record.get("middle_initial") or None,
    )


def read(path, *, sheet_name=0) -> list[RosterImportRow]:
    """Read a roster exported from a spreadsheet.

    The file must have a ``Student Number`` column, and either a ``Full Name``
    column (``"Last, First M."``) or ``First Name`` and ``Last Name`` columns
    (and optionally ``Middle Initial``). Headers are matched
    case-insensitively. Cells are trimmed. A row whose full name cannot be
    parsed is returned without first and last name, so that reconciling it
    reports the missing fields.

    Parameters
    ----------
    path : str or pathlib.Path
        Path to a ``.csv`` or ``.xlsx`` file.
    sheet_name : str or int
        The sheet to read from an Excel file. Default: the first sheet.

    Returns
    -------
    list[RosterImportRow]
        One row per data row of the file, in file order.

    Raises
    ------
    ValueError
        If the file type is unsupported, or the required columns are missing.

    """
    table = _read_table(path, sheet_name=sheet_name)

    has_names = "full_name" in table.columns or {
        "first_name",
        "last_name",
    } <= set(table.columns)
    if "student_id" not in table.columns or not has_names:
        raise ValueError(
            "Roster must have a 'Student Number' column and either a 'Full Name' "
            "column or 'First Name' and 'Last Name' columns."
        )

    return [_row_from_record(record) for record in table.to_dict(orient="records")]


def import_roster(
    path,
    existing_roster_student_ids,
    student_lookup,
    enroll=None,
    *,
    sheet_name=0,
    user_id=None,
) -> ImportSummary:
    """Read a roster file and merge it into a course roster.

    Rows are numbered as in the spreadsheet: the first data row, just below
    the header, is row 2.

    Returns
    -------
    ImportSummary
        See :func:`classrecord.reports.summarize`.

    """
    rows = read(path, sheet_name=sheet_name)
    outcomes = reconcile(
        rows, existing_roster_student_ids, student_lookup, enroll, start=2
    )
    summary = summarize(outcomes)

    logger.info(
        "Imported %d of %d roster rows from %s (%d skipped, %d errors)",
        summary.imported,
        summary.total,
        pathlib.Path(path).name,
        summary.skipped,
        len(summary.errors),
    )
    audit.log_action(
        "IMPORT_STUDENTS",
        "courses",
        user_id=user_id,
        after={
            "imported": summary.imported,
            "skipped": summary.skipped,
            "errors": len(summary.errors),
            "total": summary.total,
        },
        reason=f"roster file {pathlib.Path(path).name}",
    )
    return summary
