from ._student import Student, Students
from ._assessments import (
    TERM_WEIGHTS,
    Assessment,
    AssessmentData,
    AssessmentDraft,
    Assessments,
    Category,
    ExistingAssessment,
    NewAssessment,
    Term,
)
from ._config import (
    AssessmentChanges,
    TermConfigDraft,
    TermConfigurations,
    TermWeightConfig,
    WeightSumError,
    plan_assessment_changes,
    validate,
    validate_all,
)
from ._scores import AssessmentScore, ScoreError, ScoreStore, check_score
from ._gradebook import (
    GradingOptions,
    TermGradebook,
    compute_term_percentage,
    compute_term_percentages,
)

__all__ = [
    "Student",
    "Students",
    "TERM_WEIGHTS",
    "Assessment",
    "AssessmentData",
    "AssessmentDraft",
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
    "check_score",
    "GradingOptions",
    "TermGradebook",
    "compute_term_percentage",
    "compute_term_percentages",
]
