"""A package for computing term grades and reconciling course rosters."""

from .core import (
    Student,
    Students,
    TERM_WEIGHTS,
    Assessment,
    AssessmentData,
    Assessments,
    Category,
    ExistingAssessment,
    NewAssessment,
    Term,
    AssessmentChanges,
    TermConfigDraft,
    TermConfigurations,
    TermWeightConfig,
    WeightSumError,
    plan_assessment_changes,
    validate,
    validate_all,
    AssessmentScore,
    ScoreError,
    ScoreStore,
    GradingOptions,
    TermGradebook,
    compute_term_percentage,
    compute_term_percentages,
)

from .roster import RosterImportRow, ImportOutcome, ImportStatus, reconcile
from .reports import ImportSummary, RowError, summarize

from . import audit
from . import io
from . import plot
from . import scales
from . import statistics

__all__ = [
    "Student",
    "Students",
    "TERM_WEIGHTS",
    "Assessment",
    "AssessmentData",
    "Assessments",
    "Category",
    "ExistingAssessment",
    "NewAssessment",
    "Term",
    "AssessmentChanges",
    "TermConfigDraft",
    "TermConfigurations",
    "TermWeightConfig",
    "WeightSumError",
    "plan_assessment_changes",
    "validate",
    "validate_all",
    "AssessmentScore",
    "ScoreError",
    "ScoreStore",
    "GradingOptions",
    "TermGradebook",
    "compute_term_percentage",
    "compute_term_percentages",
    "RosterImportRow",
    "ImportOutcome",
    "ImportStatus",
    "reconcile",
    "ImportSummary",
    "RowError",
    "summarize",
    "audit",
    "io",
    "plot",
    "scales",
    "statistics",
]
