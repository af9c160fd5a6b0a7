"""Per-term category weights and the saving of term configurations."""

from __future__ import annotations

import dataclasses
import logging
import typing
import uuid
from collections.abc import Mapping

from ._assessments import (
    Assessment,
    AssessmentDraft,
    Assessments,
    ExistingAssessment,
    NewAssessment,
    Term,
)
from .. import audit

logger = logging.getLogger(__name__)


class WeightSumError(ValueError):
    """Raised when a term's category weights do not total 100."""


# TermWeightConfig ---------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class TermWeightConfig:
    """The category weights of one term of a course.

    Attributes
    ----------
    term : Term
        The term being configured.
    pt_weight : int
        Weight of the periodic-test average, in percent.
    quiz_weight : int
        Weight of the quiz average, in percent.
    exam_weight : int
        Weight of the exam, in percent.

    The three weights must total exactly 100; see :func:`validate`. The
    configuration is not validated on construction, so that a submitted but
    invalid configuration can be represented and rejected at save time.

    """

    term: Term
    pt_weight: int
    quiz_weight: int
    exam_weight: int

    def __post_init__(self):
        object.__setattr__(self, "term", Term.parse(self.term))

    @property
    def total_weight(self):
        return self.pt_weight + self.quiz_weight + self.exam_weight

    @property
    def is_valid(self) -> bool:
        try:
            validate(self)
        except WeightSumError:
            return False
        return True


def validate(config: TermWeightConfig) -> None:
    """Check that a term configuration's weights total 100.

    Raises
    ------
    WeightSumError
        If the weights do not sum to exactly 100, or any weight is negative.

    """
    weights = (config.pt_weight, config.quiz_weight, config.exam_weight)
    if any(w < 0 for w in weights):
        raise WeightSumError(f"{config.term.value}: Weights cannot be negative")

    if config.total_weight != 100:
        raise WeightSumError(f"{config.term.value}: Weights must total 100%")


def validate_all(configs: typing.Iterable[TermWeightConfig]) -> None:
    """Validate every configuration, raising on the first invalid one."""
    for config in configs:
        validate(config)


# saving -------------------------------------------------------------------------------


@dataclasses.dataclass
class TermConfigDraft:
    """A term configuration as submitted for saving.

    Attributes
    ----------
    config : TermWeightConfig
        The new weights.
    assessments : list[NewAssessment | ExistingAssessment]
        The full list of assessments the term should have after saving.
        Stored assessments that are not listed here are deleted.

    """

    config: TermWeightConfig
    assessments: list[AssessmentDraft] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class AssessmentChanges:
    """What saving a term's assessments will do to the stored assessments."""

    created: list[AssessmentDraft]
    updated: list[ExistingAssessment]
    deleted: list[str]


def plan_assessment_changes(
    existing_ids: typing.Collection[str], drafts: typing.Iterable[AssessmentDraft]
) -> AssessmentChanges:
    """Decide which assessments to create, update and delete.

    Parameters
    ----------
    existing_ids : Collection[str]
        Ids of the assessments currently stored for the term.
    drafts : Iterable[NewAssessment | ExistingAssessment]
        The submitted assessments.

    Returns
    -------
    AssessmentChanges
        :class:`NewAssessment` drafts, and :class:`ExistingAssessment` drafts
        whose id is not stored, are created. The remaining existing drafts are
        updated. Stored ids that were not submitted are deleted.

    """
    existing_ids = list(existing_ids)
    drafts = list(drafts)

    incoming_ids = {d.id for d in drafts if isinstance(d, ExistingAssessment)}

    created, updated = [], []
    for draft in drafts:
        if isinstance(draft, ExistingAssessment) and draft.id in existing_ids:
            updated.append(draft)
        elif isinstance(draft, (NewAssessment, ExistingAssessment)):
            created.append(draft)
        else:
            raise TypeError(f"Unexpected assessment draft: {draft!r}.")

    deleted = [i for i in existing_ids if i not in incoming_ids]
    return AssessmentChanges(created=created, updated=updated, deleted=deleted)


def _new_id():
    return uuid.uuid4().hex


class TermConfigurations:
    """The stored term configurations and assessments of one course.

    Acts as the persistence layer for configuration saves: configurations are
    keyed by term, and each term owns its assessments.

    Parameters
    ----------
    course : str
        An identifier of the course, used in audit records.
    configs : Optional[Iterable[TermWeightConfig]]
        Initially stored configurations.
    assessments : Optional[Iterable[Assessment]]
        Initially stored assessments. Each must belong to a stored term.
    id_factory : Optional[Callable[[], str]]
        Produces ids for newly created assessments. Defaults to random hex
        UUIDs.

    """

    def __init__(self, course, configs=None, assessments=None, id_factory=None):
        self.course = course
        self._configs: dict[Term, TermWeightConfig] = {}
        self._assessments: dict[Term, dict[str, Assessment]] = {}
        self._id_factory = _new_id if id_factory is None else id_factory

        for config in configs or ():
            self._configs[config.term] = config
            self._assessments[config.term] = {}

        for assessment in assessments or ():
            if assessment.term not in self._configs:
                raise ValueError(
                    f"Assessment {assessment.id} belongs to unconfigured term "
                    f"{assessment.term.value}."
                )
            self._assessments[assessment.term][assessment.id] = assessment

    def __repr__(self):
        return (
            f"<{self.__class__.__name__} for {self.course!r} with "
            f"{len(self._configs)} terms>"
        )

    def __contains__(self, term):
        return Term.parse(term) in self._configs

    @property
    def terms(self) -> list[Term]:
        return sorted(self._configs)

    def config(self, term) -> TermWeightConfig:
        """The stored configuration of a term.

        Raises
        ------
        KeyError
            If the term has not been configured.

        """
        term = Term.parse(term)
        if term not in self._configs:
            raise KeyError(f"Term not configured: {term.value}.")
        return self._configs[term]

    def assessments(self, term=None) -> Assessments:
        """Stored assessments ordered by category and order.

        If `term` is `None`, the assessments of every term are returned.

        """
        terms = self.terms if term is None else [Term.parse(term)]
        result = Assessments()
        for t in terms:
            result = result + Assessments(self._assessments.get(t, {}).values()).ordered()
        return result

    def save(self, drafts: Mapping[typing.Any, TermConfigDraft], user_id=None):
        """Save a batch of term configurations.

        Every configuration is validated, and every term's new assessments
        are built, before anything is stored; if one term is invalid, no term
        is saved.

        Parameters
        ----------
        drafts : Mapping[Term, TermConfigDraft]
            The submitted configurations, keyed by term.
        user_id : Optional[str]
            Who is saving; recorded in the audit trail.

        Returns
        -------
        dict[Term, AssessmentChanges]
            The changes applied to each term's assessments.

        Raises
        ------
        WeightSumError
            If any term's weights do not total 100.
        ValueError
            If a draft is keyed by a different term than its configuration, or
            a submitted assessment is invalid.

        """
        drafts = {Term.parse(term): draft for term, draft in drafts.items()}

        for term, draft in drafts.items():
            if draft.config.term != term:
                raise ValueError(
                    f"Draft for {term.value} configures {draft.config.term.value}."
                )

        validate_all(draft.config for draft in drafts.values())

        before = self._snapshot()

        # every term is built before any is stored
        staged = {term: self._build_term(drafts[term]) for term in sorted(drafts)}

        applied = {}
        for term, (stored, changes) in staged.items():
            self._configs[term] = drafts[term].config
            self._assessments[term] = stored
            applied[term] = changes

        logger.info("Saved %d term configurations for %s", len(drafts), self.course)
        audit.log_action(
            "UPDATE_TERM_CONFIGS",
            "grading",
            user_id=user_id,
            before=before,
            after=self._snapshot(),
            reason=f"course {self.course}",
        )
        return applied

    def _build_term(self, draft: TermConfigDraft):
        """The term's assessments after the draft is applied, and the changes.

        Stored state is left untouched.

        """
        term = draft.config.term
        stored = dict(self._assessments.get(term, {}))

        changes = plan_assessment_changes(list(stored), draft.assessments)

        for assessment_id in changes.deleted:
            del stored[assessment_id]

        for existing in changes.updated:
            # the category of a stored assessment never changes
            category = stored[existing.id].category
            stored[existing.id] = existing.data.to_assessment(
                existing.id, term, category=category
            )

        for created in changes.created:
            new_id = self._id_factory()
            stored[new_id] = created.data.to_assessment(new_id, term)

        logger.debug(
            "%s: created %d, updated %d, deleted %d assessments",
            term.value,
            len(changes.created),
            len(changes.updated),
            len(changes.deleted),
        )
        return stored, changes

    def _snapshot(self):
        return {
            term.value: {
                "ptWeight": config.pt_weight,
                "quizWeight": config.quiz_weight,
                "examWeight": config.exam_weight,
                "assessments": sorted(self._assessments.get(term, {})),
            }
            for term, config in sorted(self._configs.items())
        }
