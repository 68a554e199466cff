from .evaluation import (
    DimensionScore,
    DimensionScores,
    EvaluationFeedback,
    EvaluationFlags,
    EvaluationResult,
    ExtractedEntities,
    IdentifiedGaps,
    QuickWin,
    WeakBullet,
)
from .fit import FitScore, GapAnalysis, GapSummary, Recommendation
from .job import ParsedJobRequirements
from .resume import (
    CertificationEntry,
    CourseEntry,
    DocumentMetadata,
    EducationEntry,
    ExperienceEntry,
    ParsedResume,
    PersonalInfo,
    ProjectEntry,
)

__all__ = [
    "CertificationEntry",
    "CourseEntry",
    "DimensionScore",
    "DimensionScores",
    "DocumentMetadata",
    "EducationEntry",
    "EvaluationFeedback",
    "EvaluationFlags",
    "EvaluationResult",
    "ExperienceEntry",
    "ExtractedEntities",
    "FitScore",
    "GapAnalysis",
    "GapSummary",
    "IdentifiedGaps",
    "ParsedJobRequirements",
    "ParsedResume",
    "PersonalInfo",
    "ProjectEntry",
    "QuickWin",
    "Recommendation",
    "WeakBullet",
]
