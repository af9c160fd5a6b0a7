"""Status reports summarizing a roster import."""

from __future__ import annotations

import dataclasses
import typing

import pandas as pd

from .roster import ImportOutcome, ImportStatus


@dataclasses.dataclass(frozen=True)
class RowError:
    """A roster row that could not be imported because of an error."""

    student_id: typing.Optional[str]
    message: str


@dataclasses.dataclass(frozen=True)
class ImportSummary:
    """Counts and details of a roster import.

    Attributes
    ----------
    imported : int
        Number of rows that enrolled a student.
    skipped : int
        Number of rows that were skipped (already enrolled, unknown student,
        no RFID).
    errors : list[RowError]
        The rows that failed.
    total : int
        Number of rows.
    detailed_feedback : list[ImportOutcome]
        One outcome per row, in row order.

    """

    imported: int
    skipped: int
    errors: list[RowError]
    total: int
    detailed_feedback: list[ImportOutcome]

    def to_dict(self) -> dict:
        """The summary as a JSON-serializable response body."""
        return {
            "imported": self.imported,
            "skipped": self.skipped,
            "errors": [
                {"studentId": e.student_id, "message": e.message} for e in self.errors
            ],
            "total": self.total,
            "detailedFeedback": [
                {
                    "row": o.row,
                    "studentId": o.student_id,
                    "status": o.status.value,
                    "message": o.message,
                }
                for o in self.detailed_feedback
            ],
        }

    def to_frame(self) -> pd.DataFrame:
        """The detailed feedback as a table, one row per roster row."""
        return pd.DataFrame(
            [
                {
                    "row": o.row,
                    "student_id": o.student_id,
                    "status": o.status.value,
                    "message": o.message,
                }
                for o in self.detailed_feedback
            ],
            columns=["row", "student_id", "status", "message"],
        ).set_index("row")


def summarize(outcomes: typing.Iterable[ImportOutcome]) -> ImportSummary:
    """Count the outcomes of a roster import by status.

    Parameters
    ----------
    outcomes : Iterable[ImportOutcome]
        The outcomes returned by :func:`classrecord.roster.reconcile`.

    Returns
    -------
    ImportSummary
        Satisfies ``imported + skipped + len(errors) == total ==
        len(detailed_feedback)``.

    """
    outcomes = list(outcomes)
    errors = [
        RowError(o.student_id, o.message)
        for o in outcomes
        if o.status is ImportStatus.ERROR
    ]
    return ImportSummary(
        imported=sum(o.status is ImportStatus.IMPORTED for o in outcomes),
        skipped=sum(o.status is ImportStatus.SKIPPED for o in outcomes),
        errors=errors,
        total=len(outcomes),
        detailed_feedback=outcomes,
    )
