"""Computing weighted term percentages from raw assessment scores."""

from __future__ import annotations

import dataclasses
import typing

import numpy as np
import pandas as pd

from ..scales import NUMERIC_SCALE, PASSING_GRADE, map_percentages_to_numeric_grades
from ._assessments import TERM_WEIGHTS, Assessments, Category
from ._config import TermWeightConfig
from ._scores import ScoreStore, _is_absent


# private helper functions -------------------------------------------------------------


def _student_id(student):
    return getattr(student, "student_id", student)


def _score_table(scores, assessment_ids) -> pd.DataFrame:
    """Build a students × assessments table from the given scores.

    Scores for assessments outside of `assessment_ids` are ignored.

    """
    if isinstance(scores, ScoreStore):
        return scores.points.reindex(columns=assessment_ids)

    columns: dict[str, dict[str, float]] = {a: {} for a in assessment_ids}
    for s in scores:
        if s.assessment_id in columns and not _is_absent(s.score):
            columns[s.assessment_id][_student_id(s.student_id)] = s.score

    return pd.DataFrame(columns, columns=assessment_ids, dtype=float)


def _none_if_nan(x) -> typing.Optional[float]:
    return None if pd.isna(x) else float(x)


# GradingOptions -----------------------------------------------------------------------


@dataclasses.dataclass
class GradingOptions:
    """Configures how percentages become grades.

    Attributes
    ----------
    scale : OrderedDict
        Maps numeric grades to the minimum percentage earning them. Default:
        :attr:`classrecord.scales.NUMERIC_SCALE`.
    term_weights : dict[Term, float]
        Weight of each term in the final grade. Default:
        :attr:`classrecord.core.TERM_WEIGHTS`.
    passing_grade : float
        The worst final numeric grade that is still a pass. Default: 3.00.

    """

    scale: dict = dataclasses.field(default_factory=lambda: NUMERIC_SCALE.copy())
    term_weights: dict = dataclasses.field(default_factory=lambda: dict(TERM_WEIGHTS))
    passing_grade: float = PASSING_GRADE


# TermGradebook ========================================================================


class TermGradebook:
    """The grades of a course's students for a single term.

    Only the enabled assessments of the configuration's term take part.
    Periodic tests and quizzes are averaged per category over *every* enabled
    assessment in that category, so an assessment the student has no score
    on contributes zero to the average. The exam is the first enabled exam
    assessment; a student without an exam score has no term percentage.

    Parameters
    ----------
    config : TermWeightConfig
        The term's weights. Assumed to have been validated when it was saved.
    assessments : Iterable[Assessment]
        Assessments of the course. Assessments of other terms and disabled
        assessments are ignored.
    scores : ScoreStore or Iterable[AssessmentScore]
        Raw scores. Scores on ignored assessments are ignored too.
    students : Optional[Iterable]
        The students (or student ids) to grade, in order. Defaults to every
        student that has a score.
    opts : Optional[GradingOptions]
        How percentages map to numeric grades.

    Attributes
    ----------
    config : TermWeightConfig
    assessments : Assessments
        The enabled assessments of the term, ordered by category and order.
    points : pandas.DataFrame
        Raw scores, one row per student and one column per assessment. Absent
        scores are `NaN`.

    """

    def __init__(self, config, assessments, scores, students=None, opts=None):
        self.config: TermWeightConfig = config
        self.opts = opts if opts is not None else GradingOptions()
        self.assessments = (
            Assessments(assessments).in_term(config.term).enabled().ordered()
        )

        points = _score_table(scores, self.assessments.ids)
        if students is not None:
            points = points.reindex(index=[_student_id(s) for s in students])
        self.points = points

    def __repr__(self):
        return (
            f"<{self.__class__.__name__} for {self.config.term.value} with "
            f"{len(self.assessments)} assessments "
            f"and {len(self.points.index)} students>"
        )

    # properties: percentages ----------------------------------------------------------

    @property
    def student_ids(self) -> list:
        return list(self.points.index)

    @property
    def percentages(self) -> pd.DataFrame:
        """Each (transmuted) score as a percentage of its assessment's maximum.

        Has the same index and columns as :attr:`points`. Absent scores, and
        scores on assessments whose maximum is not positive, are `NaN`.

        """
        result = {}
        for assessment in self.assessments:
            column = assessment.percentage(self.points[assessment.id])
            result[assessment.id] = (
                pd.Series(np.nan, index=self.points.index) if column is None else column
            )
        return pd.DataFrame(result, index=self.points.index, columns=self.assessments.ids)

    def _category_average(self, category):
        ids = self.assessments.of_category(category).ids
        if not ids:
            return pd.Series(0.0, index=self.points.index)
        # missing percentages count as zero, but the divisor is every enabled
        # assessment in the category
        return self.percentages[ids].sum(axis=1) / len(ids)

    @property
    def category_averages(self) -> pd.DataFrame:
        """The periodic-test and quiz averages of each student, as percentages."""
        return pd.DataFrame(
            {
                Category.PT.value: self._category_average(Category.PT),
                Category.QUIZ.value: self._category_average(Category.QUIZ),
            },
            index=self.points.index,
        )

    @property
    def exam_percentage(self) -> pd.Series:
        """Each student's exam percentage; `NaN` if there is no exam score."""
        exam = self.assessments.exam()
        if exam is None:
            return pd.Series(np.nan, index=self.points.index, dtype=float)
        return self.percentages[exam.id]

    @property
    def breakdown(self) -> pd.DataFrame:
        """The weighted contribution of each category, and their total.

        The columns are ``PT``, ``QUIZ``, ``EXAM`` and ``total``. Each
        category column is the category's percentage scaled by the category
        weight; ``total`` is their sum, and is `NaN` when the exam is.

        """
        pt, quiz, exam = (c.value for c in Category)
        averages = self.category_averages

        table = pd.DataFrame(index=self.points.index)
        table[pt] = averages[pt] / 100 * self.config.pt_weight
        table[quiz] = averages[quiz] / 100 * self.config.quiz_weight
        table[exam] = self.exam_percentage / 100 * self.config.exam_weight
        table["total"] = table[pt] + table[quiz] + table[exam]
        return table

    @property
    def term_percentage(self) -> pd.Series:
        """Each student's weighted term percentage; `NaN` without an exam score.

        The result is not clamped to [0, 100]; scores are validated when they
        are recorded.

        """
        return self.breakdown["total"].rename(self.config.term.value)

    @property
    def numeric_grade(self) -> pd.Series:
        """Each student's numeric grade for the term; `NaN` without a percentage."""
        return map_percentages_to_numeric_grades(self.term_percentage, self.opts.scale)

    def term_percentages(self) -> dict:
        """Map each student id to their term percentage, or `None`."""
        return {
            student_id: _none_if_nan(value)
            for student_id, value in self.term_percentage.items()
        }


# public functions ---------------------------------------------------------------------


def compute_term_percentages(config, assessments, scores, student_ids=None) -> dict:
    """Compute the weighted term percentage of several students.

    Parameters
    ----------
    config : TermWeightConfig
        The term's weights.
    assessments : Iterable[Assessment]
        The course's assessments.
    scores : ScoreStore or Iterable[AssessmentScore]
        The raw scores.
    student_ids : Optional[Iterable[str]]
        The students to compute percentages for. Defaults to every student
        with a score.

    Returns
    -------
    dict[str, Optional[float]]
        Maps each student id to the percentage, or to `None` if the student
        has no exam score.

    """
    gradebook = TermGradebook(config, assessments, scores, students=student_ids)
    return gradebook.term_percentages()


def compute_term_percentage(
    config, assessments, scores, student_id
) -> typing.Optional[float]:
    """Compute one student's weighted term percentage.

    Returns `None` if the student has no exam score, or the term has no exam.

    Example
    -------
    With weights 30/30/40, a single periodic test scored 80/100, no quizzes,
    and an exam scored 50/100, the result is ``.3 * 80 + .3 * 0 + .4 * 50 ==
    44``.

    """
    return compute_term_percentages(config, assessments, scores, [student_id])[
        student_id
    ]
