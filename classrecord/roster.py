"""Merging an uploaded list of students into a course roster."""

from __future__ import annotations

import dataclasses
import enum
import logging
import typing

from .core import Student

logger = logging.getLogger(__name__)

ALREADY_ENROLLED = "Already enrolled in this course"
NOT_FOUND = "Student not found in database"
NO_RFID = "Student does not have RFID registration"
IMPORTED = "Successfully added to course"


@dataclasses.dataclass(frozen=True)
class RosterImportRow:
    """One row of an uploaded roster, already parsed and trimmed."""

    student_id: typing.Optional[str]
    first_name: typing.Optional[str]
    last_name: typing.Optional[str]
    middle_initial: typing.Optional[str] = None

    def missing_fields(self) -> list[str]:
        """Names of the required fields that are absent or blank."""
        required = [
            ("student_id", self.student_id),
            ("first_name", self.first_name),
            ("last_name", self.last_name),
        ]
        return [name for name, value in required if value is None or not str(value).strip()]


class ImportStatus(enum.Enum):
    IMPORTED = "imported"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclasses.dataclass(frozen=True)
class ImportOutcome:
    """What happened to one roster row.

    Attributes
    ----------
    row : int
        The row's number, as shown to a person (counting from one, or from
        wherever the caller's numbering starts).
    student_id : Optional[str]
    status : ImportStatus
    message : str

    """

    row: int
    student_id: typing.Optional[str]
    status: ImportStatus
    message: str


StudentLookup = typing.Callable[[str], typing.Optional[Student]]


def _reconcile_row(row, roster, student_lookup, enroll):
    """Decide the status of a single row. May raise if lookup or enroll fail."""
    student_id = str(row.student_id).strip()

    if student_id in roster:
        return ImportStatus.SKIPPED, ALREADY_ENROLLED

    student = student_lookup(student_id)
    if student is None:
        return ImportStatus.SKIPPED, NOT_FOUND

    if not student.has_rfid:
        return ImportStatus.SKIPPED, NO_RFID

    if enroll is not None:
        enroll(student)
    roster.add(student_id)
    return ImportStatus.IMPORTED, IMPORTED


def reconcile(
    rows: typing.Iterable[RosterImportRow],
    existing_roster_student_ids: typing.Iterable[str],
    student_lookup: StudentLookup,
    enroll: typing.Optional[typing.Callable[[Student], None]] = None,
    *,
    start: int = 1,
) -> list[ImportOutcome]:
    """Classify each row of an uploaded roster as imported, skipped, or an error.

    Rows are processed strictly in order. A student imported by an earlier
    row counts as enrolled for every later row, so the second occurrence of a
    student id in one batch is skipped as already enrolled.

    Only students that already exist (according to `student_lookup`) and
    have an RFID card are enrolled; the reconciler never creates students.

    Parameters
    ----------
    rows : Iterable[RosterImportRow]
        The parsed rows.
    existing_roster_student_ids : Iterable[str]
        Ids of the students already enrolled in the course. Not modified.
    student_lookup : Callable[[str], Optional[Student]]
        Finds a student by id, returning `None` if there is none.
    enroll : Optional[Callable[[Student], None]]
        Called to persist each enrollment. If it raises, the row becomes an
        error and the student is not counted as enrolled.
    start : int
        The number of the first row. Default: 1.

    Returns
    -------
    list[ImportOutcome]
        Exactly one outcome per row, in the order of the rows.

    """
    roster = set(existing_roster_student_ids)
    outcomes = []

    for number, row in enumerate(rows, start=start):
        missing = row.missing_fields()
        if missing:
            student_id = None if "student_id" in missing else str(row.student_id).strip()
            outcomes.append(
                ImportOutcome(
                    row=number,
                    student_id=student_id,
                    status=ImportStatus.ERROR,
                    message=f"Missing required fields: {', '.join(missing)}",
                )
            )
            continue

        try:
            status, message = _reconcile_row(row, roster, student_lookup, enroll)
        except Exception as exc:
            logger.exception("Error importing row %d (%s)", number, row.student_id)
            status, message = ImportStatus.ERROR, str(exc) or exc.__class__.__name__

        if status is ImportStatus.SKIPPED:
            logger.debug("Row %d (%s) skipped: %s", number, row.student_id, message)

        outcomes.append(
            ImportOutcome(
                row=number,
                student_id=str(row.student_id).strip(),
                status=status,
                message=message,
            )
        )

    return outcomes
