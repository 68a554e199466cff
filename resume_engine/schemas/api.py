from __future__ import annotations

from pydantic import BaseModel, Field

from .fit import RecommendationType
from .job import ParsedJobRequirements
from .resume import ParsedResume


class ResumeInput(BaseModel):
    """Either a structured resume, its raw text, or both.

    When only ``raw_text`` is present it is parsed with the plain-text parser.
    When both are present ``parsed`` is scored and ``raw_text`` feeds the
    presentation checks.
    """

    parsed: ParsedResume | None = None
    raw_text: str | None = None


class JobDescriptionInput(BaseModel):
    raw_text: str = ""
    parsed_requirements: ParsedJobRequirements | None = None


class EvaluateRequest(BaseModel):
    resume: ResumeInput | None = None


class EvaluateFitRequest(BaseModel):
    resume: ResumeInput | None = None
    job_description: JobDescriptionInput | None = None


class ParseJobDescriptionRequest(BaseModel):
    raw_text: str = Field(default="", max_length=50000)


class ScoreResponse(BaseModel):
    score: int = Field(ge=0, le=100)


class RecommendationResponse(BaseModel):
    recommendation: RecommendationType
    fit_score: int = Field(ge=0, le=100)
    reasoning: str


class CacheStatsResponse(BaseModel):
    size: int
    max_size: int
    hits: int
    misses: int
    evictions: int
    hit_rate: float


class ErrorDetail(BaseModel):
    code: str
    title: str
    message: str
    suggestion: str
