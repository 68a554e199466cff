from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .evaluation import EvaluationResult
from .job import SeniorityLevel

RecommendationType = Literal["APPLY", "OPTIMIZE_FIRST", "NOT_READY"]
SeniorityAlignment = Literal["underqualified", "aligned", "overqualified"]
ConfidenceLevel = Literal["low", "medium", "high"]
ImprovementType = Literal["add_skill", "add_metric", "strengthen_verb", "add_experience"]


class SkillsGap(BaseModel):
    model_config = ConfigDict(frozen=True)

    matched: list[str] = Field(default_factory=list)
    critical_missing: list[str] = Field(default_factory=list)
    nice_to_have_missing: list[str] = Field(default_factory=list)
    transferable: list[str] = Field(default_factory=list)
    match_percentage: float = Field(ge=0, le=100)


class ToolsGap(BaseModel):
    model_config = ConfigDict(frozen=True)

    matched: list[str] = Field(default_factory=list)
    critical_missing: list[str] = Field(default_factory=list)
    nice_to_have_missing: list[str] = Field(default_factory=list)
    match_percentage: float = Field(ge=0, le=100)


class ExperienceGap(BaseModel):
    model_config = ConfigDict(frozen=True)

    matched_types: list[str] = Field(default_factory=list)
    missing_types: list[str] = Field(default_factory=list)
    coverage_score: float = Field(ge=0, le=100)


class SeniorityGap(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_level: SeniorityLevel
    role_expected: SeniorityLevel
    alignment: SeniorityAlignment
    gap_years: float | None = Field(default=None, ge=0)


class IndustryGap(BaseModel):
    model_config = ConfigDict(frozen=True)

    keywords_matched: list[str] = Field(default_factory=list)
    keywords_missing: list[str] = Field(default_factory=list)
    match_percentage: float = Field(ge=0, le=100)


class GapAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    skills: SkillsGap
    tools: ToolsGap
    experience: ExperienceGap
    seniority: SeniorityGap
    industry: IndustryGap


class GapSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_critical_gaps: int = Field(ge=0)
    critical_areas: list[str] = Field(default_factory=list)
    overall_match: int = Field(ge=0, le=100)


class FitDimensions(BaseModel):
    model_config = ConfigDict(frozen=True)

    technical_match: int = Field(ge=0, le=100)
    seniority_match: int = Field(ge=0, le=100)
    experience_match: int = Field(ge=0, le=100)
    signal_quality: int = Field(ge=0, le=100)


class FitFlags(BaseModel):
    model_config = ConfigDict(frozen=True)

    underqualified: bool = False
    overqualified: bool = False
    career_switch: bool = False
    low_signal: bool = False
    stretch_role: bool = False


class PriorityImprovement(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: ImprovementType
    target: str
    why: str
    estimated_impact: int = Field(ge=0)


class FitProcessingMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    job_parsed_successfully: bool = True
    confidence: ConfidenceLevel = "medium"


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    recommendation: RecommendationType
    reasoning: str
    confidence: ConfidenceLevel


class FitScore(EvaluationResult):
    fit_score: int = Field(ge=0, le=100)
    fit_dimensions: FitDimensions
    gaps: GapAnalysis
    gap_summary: GapSummary
    fit_flags: FitFlags
    recommendation: RecommendationType
    recommendation_reasoning: str
    tailoring_hints: list[str] = Field(default_factory=list, max_length=6)
    priority_improvements: list[PriorityImprovement] = Field(default_factory=list, max_length=5)
    confidence: ConfidenceLevel
    fit_meta: FitProcessingMeta = Field(default_factory=FitProcessingMeta)
