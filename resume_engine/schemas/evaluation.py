from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .resume import ParseQuality

ENGINE_VERSION = "2.1"

ResumeLevel = Literal["Early", "Growing", "Solid", "Strong", "Exceptional"]

DimensionName = Literal["skill_capital", "execution_impact", "learning_adaptivity", "signal_quality"]
DIMENSION_NAMES: tuple[DimensionName, ...] = (
    "skill_capital",
    "execution_impact",
    "learning_adaptivity",
    "signal_quality",
)


class DimensionScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    breakdown: dict[str, float] = Field(default_factory=dict)
    issues: list[str] = Field(default_factory=list)


class DimensionScores(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill_capital: DimensionScore
    execution_impact: DimensionScore
    learning_adaptivity: DimensionScore
    signal_quality: DimensionScore

    def as_dict(self) -> dict[str, DimensionScore]:
        return {name: getattr(self, name) for name in DIMENSION_NAMES}


class ExtractedEntities(BaseModel):
    model_config = ConfigDict(frozen=True)

    skills: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    titles: list[str] = Field(default_factory=list)
    companies: list[str] = Field(default_factory=list)
    industries: list[str] = Field(default_factory=list)
    bullets_sample: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)


class IdentifiedGaps(BaseModel):
    model_config = ConfigDict(frozen=True)

    missing_skills: bool = False
    missing_metrics: bool = False
    weak_action_verbs: bool = False
    generic_descriptions: bool = False
    poor_formatting: bool = False
    no_education: bool = False
    spelling_errors: bool = False


class BulletLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    company: str
    title: str
    index: int = Field(ge=0)


class WeakBullet(BaseModel):
    model_config = ConfigDict(frozen=True)

    bullet: str
    issues: list[str] = Field(default_factory=list)
    location: BulletLocation


class QuickWin(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: str
    estimated_impact: str
    effort: str
    priority: int = Field(ge=1)


class EvaluationFeedback(BaseModel):
    model_config = ConfigDict(frozen=True)

    strengths: list[str] = Field(default_factory=list)
    critical_gaps: list[str] = Field(default_factory=list)
    quick_wins: list[QuickWin] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class EvaluationFlags(BaseModel):
    model_config = ConfigDict(frozen=True)

    no_skills_listed: bool = False
    possible_spam: bool = False
    no_experience: bool = False
    generic_descriptions: bool = False
    no_metrics: bool = False
    stagnant: bool = False
    parsing_failed: bool = False
    too_short: bool = False


class ProcessingMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    processing_time_ms: float = Field(ge=0)
    timestamp: str
    version: Literal["2.1"] = "2.1"
    parse_quality: ParseQuality | None = None


class EvaluationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    resume_score: int = Field(ge=0, le=100)
    overall_score: int = Field(ge=0, le=100)
    level: ResumeLevel

    content_quality_score: int = Field(ge=0, le=100)
    ats_compatibility_score: int = Field(ge=0, le=100)
    format_quality_score: int = Field(ge=0, le=100)
    impact_score: int = Field(ge=0, le=100)

    dimensions: DimensionScores
    constraints_applied: list[str] = Field(default_factory=list)

    weaknesses: list[str] = Field(default_factory=list)
    extracted: ExtractedEntities
    identified_gaps: IdentifiedGaps
    weak_bullets: list[WeakBullet] = Field(default_factory=list, max_length=5)

    feedback: EvaluationFeedback
    flags: EvaluationFlags
    summary: str
    meta: ProcessingMeta
