"""Terms, assessment categories, and collections of assessments."""

from __future__ import annotations

import dataclasses
import datetime
import enum
import typing
from collections.abc import Sequence


# enumerations =========================================================================


class Term(enum.Enum):
    """A grading period within a course, in chronological order."""

    PRELIM = "PRELIM"
    MIDTERM = "MIDTERM"
    PREFINALS = "PREFINALS"
    FINALS = "FINALS"

    @classmethod
    def parse(cls, value) -> "Term":
        """Interpret a term given in any of the common spellings.

        Accepts :class:`Term` instances, the enum values themselves, and the
        keys used by the class record pages (``"prelims"``, ``"preFinals"``,
        ``"pre-finals"``, ...). Matching is case-insensitive.

        Raises
        ------
        ValueError
            If the value does not name a term.

        """
        if isinstance(value, cls):
            return value

        key = str(value).strip().upper().replace("-", "").replace("_", "")
        aliases = {"PRELIMS": "PRELIM", "MIDTERMS": "MIDTERM", "FINAL": "FINALS"}
        key = aliases.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown term: {value!r}.") from None

    @property
    def position(self) -> int:
        return list(Term).index(self)

    def __lt__(self, other):
        if not isinstance(other, Term):
            return NotImplemented
        return self.position < other.position


TERM_WEIGHTS = {
    Term.PRELIM: 0.2,
    Term.MIDTERM: 0.2,
    Term.PREFINALS: 0.2,
    Term.FINALS: 0.4,
}
"""Weight of each term's grade in the final grade."""


class Category(enum.Enum):
    """The category an assessment is weighted under."""

    PT = "PT"
    QUIZ = "QUIZ"
    EXAM = "EXAM"

    @property
    def position(self) -> int:
        return list(Category).index(self)


# assessments ==========================================================================


@dataclasses.dataclass(frozen=True)
class Assessment:
    """A single periodic test, quiz or exam within one term.

    Attributes
    ----------
    id : str
        Unique identifier of the assessment.
    term : Term
        The term the assessment belongs to.
    category : Category
        Whether the assessment is a periodic test, a quiz, or the exam.
    max_score : float
        The highest score possible. Assessments whose maximum is not positive
        never contribute a percentage.
    enabled : bool
        Disabled assessments are ignored entirely when computing grades.
    order : int
        Position of the assessment within its category.
    name : Optional[str]
        Display name, e.g. ``"Quiz 2"``.
    date : Optional[datetime.date]
        When the assessment was given.
    transmutation_base : float
        Percentage of the raw score that is kept when transmuting; the
        remainder of the maximum score is granted outright. ``0`` (the
        default) disables transmutation.

    """

    id: str
    term: Term
    category: Category
    max_score: float
    enabled: bool = True
    order: int = 0
    name: typing.Optional[str] = None
    date: typing.Optional[datetime.date] = None
    transmutation_base: float = 0

    def __post_init__(self):
        object.__setattr__(self, "term", Term.parse(self.term))
        object.__setattr__(self, "category", Category(self.category))
        if not 0 <= self.transmutation_base <= 100:
            raise ValueError("Transmutation base must be between 0 and 100.")

    def transmute(self, raw_score: float) -> float:
        """Apply this assessment's transmutation to a raw score."""
        base = self.transmutation_base
        if base == 0:
            return raw_score
        return raw_score * (base / 100) + ((100 - base) / 100) * self.max_score

    def percentage(self, raw_score) -> typing.Optional[float]:
        """The (transmuted) score as a percentage of the maximum.

        `raw_score` may be a number or a pandas Series of scores, in which
        case absent scores stay `NaN`. Returns `None` when there is no score
        or the maximum is not positive.

        """
        if raw_score is None or self.max_score <= 0:
            return None
        return self.transmute(raw_score) / self.max_score * 100


@dataclasses.dataclass(frozen=True)
class AssessmentData:
    """The editable fields of an assessment, as submitted when saving a term."""

    category: Category
    max_score: float
    enabled: bool = True
    order: int = 0
    name: typing.Optional[str] = None
    date: typing.Optional[datetime.date] = None
    transmutation_base: float = 0

    def __post_init__(self):
        object.__setattr__(self, "category", Category(self.category))

    def to_assessment(self, id: str, term: Term, category=None) -> Assessment:
        return Assessment(
            id=id,
            term=term,
            category=self.category if category is None else category,
            max_score=self.max_score,
            enabled=self.enabled,
            order=self.order,
            name=self.name,
            date=self.date,
            transmutation_base=self.transmutation_base,
        )


@dataclasses.dataclass(frozen=True)
class NewAssessment:
    """An assessment that does not exist yet and should be created."""

    data: AssessmentData


@dataclasses.dataclass(frozen=True)
class ExistingAssessment:
    """An already-stored assessment that should be updated."""

    id: str
    data: AssessmentData


AssessmentDraft = typing.Union[NewAssessment, ExistingAssessment]


class Assessments(Sequence[Assessment]):
    """A sequence of assessments.

    Behaves like a list of :class:`Assessment` objects, with extra methods for
    selecting the assessments that take part in a term's grade.

    """

    def __init__(self, assessments: typing.Iterable[Assessment] = ()):
        self._assessments = list(assessments)

    def __contains__(self, element):
        if isinstance(element, Assessment):
            return element in self._assessments
        return element in self.ids

    def __len__(self):
        return len(self._assessments)

    def __iter__(self):
        return iter(self._assessments)

    def __eq__(self, other):
        return list(self) == list(other)

    def __add__(self, other):
        return Assessments(self._assessments + list(other))

    def __getitem__(self, index):
        return self._assessments[index]

    def __repr__(self):
        return f"Assessments({[a.id for a in self._assessments]})"

    @property
    def ids(self) -> list[str]:
        return [a.id for a in self._assessments]

    def by_id(self, assessment_id: str) -> Assessment:
        """Look up an assessment by id.

        Raises
        ------
        KeyError
            If there is no assessment with that id.

        """
        for assessment in self._assessments:
            if assessment.id == assessment_id:
                return assessment
        raise KeyError(f"Assessment not found: {assessment_id}.")

    def enabled(self) -> "Assessments":
        """Only the enabled assessments."""
        return self.__class__(a for a in self._assessments if a.enabled)

    def in_term(self, term) -> "Assessments":
        """Only the assessments of the given term."""
        term = Term.parse(term)
        return self.__class__(a for a in self._assessments if a.term == term)

    def of_category(self, category) -> "Assessments":
        """Only the assessments of the given category, ordered by ``order``."""
        category = Category(category)
        return self.__class__(
            sorted(
                (a for a in self._assessments if a.category == category),
                key=lambda a: a.order,
            )
        )

    def ordered(self) -> "Assessments":
        """Assessments sorted by category, then by order within the category."""
        return self.__class__(
            sorted(self._assessments, key=lambda a: (a.category.position, a.order))
        )

    def exam(self) -> typing.Optional[Assessment]:
        """The first exam by order, or `None` if no exam is configured."""
        exams = self.of_category(Category.EXAM)
        return exams[0] if exams else None
