from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

SeniorityLevel = Literal["entry", "mid", "senior", "lead"]
SENIORITY_ORDER: tuple[SeniorityLevel, ...] = ("entry", "mid", "senior", "lead")

ExperienceType = Literal[
    "leadership",
    "cross_functional",
    "customer_facing",
    "technical_architecture",
    "data_analysis",
    "project_management",
]


class ParsedJobRequirements(BaseModel):
    model_config = ConfigDict(frozen=True)

    required_skills: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    required_tools: list[str] = Field(default_factory=list)
    preferred_tools: list[str] = Field(default_factory=list)
    seniority_expected: SeniorityLevel | None = None
    domain_keywords: list[str] = Field(default_factory=list)
    required_experience_types: list[ExperienceType] = Field(default_factory=list)
    years_experience_min: float | None = Field(default=None, ge=0)
    years_experience_max: float | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_year_range(self) -> "ParsedJobRequirements":
        low, high = self.years_experience_min, self.years_experience_max
        if low is not None and high is not None and high < low:
            raise ValueError("years_experience_max must not be lower than years_experience_min")
        return self

    def detail_count(self) -> int:
        return (
            len(self.required_skills)
            + len(self.required_tools)
            + len(self.preferred_skills)
            + len(self.domain_keywords)
        )
