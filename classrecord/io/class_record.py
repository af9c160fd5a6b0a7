"""Exporting term grades to, and reading scores from, class record sheets."""

import logging
import pathlib

import pandas as pd

from ..core import AssessmentScore, Assessments, TermGradebook
from ..scales import format_numeric_grade

logger = logging.getLogger(__name__)


def _label(assessment):
    return assessment.name if assessment.name else assessment.id


def to_frame(gradebook: TermGradebook, students=None) -> pd.DataFrame:
    """Lay out a term gradebook as a class record table.

    The table has one row per student, with the raw scores of each assessment
    (labelled by name), the weighted periodic-test, quiz and exam
    contributions, the term percentage and the numeric grade.

    Parameters
    ----------
    gradebook : TermGradebook
    students : Optional[Students]
        If given, a ``Name`` column is filled from these students.

    """
    points = gradebook.points.copy()
    points.columns = [_label(a) for a in gradebook.assessments]

    breakdown = gradebook.breakdown.round(2)
    breakdown.columns = ["PT", "Quiz", "Exam", "Total %"]

    table = pd.concat([points, breakdown], axis=1)
    table["Grade"] = [format_numeric_grade(g) for g in gradebook.numeric_grade]

    if students is not None:
        names = [
            s.name if s is not None else None
            for s in (students.by_id(i) for i in table.index)
        ]
        table.insert(0, "Name", pd.Series(names, index=table.index, dtype=object))

    table.index.name = "Student Number"
    return table


def write(gradebook: TermGradebook, path, students=None):
    """Export a term gradebook as a class record.

    The format follows the file suffix: ``.csv`` or ``.xlsx``. For Excel
    files, the sheet is named after the term.

    Raises
    ------
    ValueError
        If the file type is unsupported.

    """
    path = pathlib.Path(path)
    table = to_frame(gradebook, students)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        table.to_csv(path)
    elif suffix == ".xlsx":
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            table.to_excel(writer, sheet_name=gradebook.config.term.value)
    else:
        raise ValueError(f"Unsupported file type: {path.suffix!r}.")

    logger.info(
        "Wrote %s class record for %d students to %s",
        gradebook.config.term.value,
        len(table),
        path.name,
    )


def read_scores(path, assessments, *, id_column="Student Number"):
    """Read raw scores from a class record sheet.

    The sheet has one row per student, identified by `id_column`, and one
    column per assessment, headed by the assessment's name or id. Other
    columns are ignored. Blank cells are absent scores.

    The scores are not validated; record them with
    :meth:`ScoreStore.record_many`, which rejects the whole batch if any
    score is out of range.

    Returns
    -------
    list[AssessmentScore]

    Raises
    ------
    ValueError
        If the file type is unsupported, the id column is missing, or a cell
        is not a number.

    """
    path = pathlib.Path(path)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        table = pd.read_csv(path, dtype={id_column: str})
    elif suffix == ".xlsx":
        table = pd.read_excel(path, dtype={id_column: str})
    else:
        raise ValueError(f"Unsupported file type: {path.suffix!r}.")

    if id_column not in table.columns:
        raise ValueError(f"Missing column: {id_column!r}.")

    assessments = Assessments(assessments)
    by_label = {}
    for assessment in assessments:
        by_label[assessment.id] = assessment
        by_label[_label(assessment)] = assessment

    table = table.set_index(table[id_column].str.strip())

    scores = []
    for column in table.columns:
        if column not in by_label:
            continue
        assessment = by_label[column]
        values = pd.to_numeric(table[column], errors="raise")
        for student_id, value in values.dropna().items():
            scores.append(AssessmentScore(student_id, assessment.id, float(value)))

    return scores
