"""Storage of raw assessment scores."""

from __future__ import annotations

import dataclasses
import logging
import math
import typing

import numpy as np
import pandas as pd

from ._assessments import Assessment, Assessments

logger = logging.getLogger(__name__)


class ScoreError(ValueError):
    """Raised when a score is outside the range allowed by its assessment."""


@dataclasses.dataclass(frozen=True)
class AssessmentScore:
    """A student's raw score on one assessment.

    A score of `None` means the score is absent.

    """

    student_id: str
    assessment_id: str
    score: typing.Optional[float]


def _is_absent(score):
    return score is None or (isinstance(score, float) and math.isnan(score))


def check_score(assessment: Assessment, score) -> None:
    """Check that a score is allowed for an assessment.

    Absent scores are always allowed.

    Raises
    ------
    ScoreError
        If the score is negative or exceeds the assessment's maximum.

    """
    if _is_absent(score):
        return

    if score < 0:
        raise ScoreError("Score cannot be negative")

    if score > assessment.max_score:
        raise ScoreError(
            f"Score {score} exceeds max score of {assessment.max_score} "
            f"for assessment {assessment.id}"
        )


class ScoreStore:
    """Raw scores of students on a set of assessments.

    Scores are kept in a table with one row per student and one column per
    assessment; absent scores are `NaN`. A missing score is never treated as
    zero by the store itself.

    Parameters
    ----------
    assessments : Iterable[Assessment]
        The assessments scores may be recorded for.
    scores : Iterable[AssessmentScore]
        Initial scores. They are validated like those passed to
        :meth:`record_many`.

    """

    def __init__(self, assessments, scores=()):
        self.assessments = Assessments(assessments)
        self._points = pd.DataFrame(
            columns=pd.Index(self.assessments.ids, dtype=object), dtype=float
        )
        self.record_many(scores)

    def __repr__(self):
        return (
            f"<{self.__class__.__name__} with {len(self)} scores "
            f"for {len(self._points.index)} students>"
        )

    def __len__(self):
        return int(self._points.notna().sum().sum())

    def __iter__(self) -> typing.Iterator[AssessmentScore]:
        for assessment_id in self._points.columns:
            for student_id, score in self._points[assessment_id].dropna().items():
                yield AssessmentScore(student_id, assessment_id, float(score))

    @property
    def points(self) -> pd.DataFrame:
        """A copy of the score table (students × assessments)."""
        return self._points.copy()

    @property
    def student_ids(self) -> list[str]:
        return list(self._points.index)

    def _check(self, student_id, assessment_id, score) -> Assessment:
        if not student_id or not assessment_id:
            raise ValueError("student_id and assessment_id are required")
        assessment = self.assessments.by_id(assessment_id)
        check_score(assessment, score)
        return assessment

    def _set(self, student_id, assessment_id, score):
        if _is_absent(score):
            if student_id in self._points.index:
                self._points.loc[student_id, assessment_id] = np.nan
            return
        self._points.loc[student_id, assessment_id] = float(score)

    def get(self, student_id: str, assessment_id: str) -> typing.Optional[float]:
        """The student's score on the assessment, or `None` if absent."""
        if assessment_id not in self._points.columns:
            raise KeyError(f"Assessment not found: {assessment_id}.")
        if student_id not in self._points.index:
            return None
        value = self._points.loc[student_id, assessment_id]
        return None if pd.isna(value) else float(value)

    def record(self, student_id: str, assessment_id: str, score) -> None:
        """Record (or, with a score of `None`, delete) a single score.

        Raises
        ------
        KeyError
            If the assessment is unknown.
        ScoreError
            If the score is not between zero and the assessment's maximum.

        """
        self._check(student_id, assessment_id, score)
        self._set(student_id, assessment_id, score)

    def record_many(self, scores: typing.Iterable[AssessmentScore]) -> int:
        """Record a batch of scores.

        The whole batch is validated before any score is recorded, so either
        every score is recorded or none is.

        Returns
        -------
        int
            The number of scores in the batch.

        """
        scores = list(scores)
        for s in scores:
            self._check(s.student_id, s.assessment_id, s.score)

        for s in scores:
            self._set(s.student_id, s.assessment_id, s.score)

        if scores:
            logger.debug("Recorded %d scores", len(scores))
        return len(scores)
