from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ParseQuality = Literal["high", "medium", "low"]
DocumentFormat = Literal["pdf", "docx", "txt"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class PersonalInfo(_Frozen):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    linkedin: str | None = None
    github: str | None = None
    portfolio: str | None = None


class ExperienceEntry(_Frozen):
    title: str = ""
    company: str = ""
    location: str | None = None
    start_date: str = ""
    end_date: str = ""
    # 0 means unknown; scorers substitute per-role fallbacks.
    duration_months: int = Field(default=0, ge=0)
    bullets: list[str] = Field(default_factory=list)
    is_current: bool = False


class EducationEntry(_Frozen):
    degree: str = ""
    field: str | None = None
    institution: str = ""
    graduation_year: int | None = None
    gpa: float | None = None


class ProjectEntry(_Frozen):
    name: str
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    year: int | None = None
    link: str | None = None


class CertificationEntry(_Frozen):
    name: str
    issuer: str = ""
    year: int | None = None


class CourseEntry(_Frozen):
    name: str
    institution: str = ""
    year: int | None = None


class DocumentMetadata(_Frozen):
    """What the extraction step measured about the source document.

    ``word_count`` and ``parse_quality`` are None when the caller did not measure
    them. Unknown values never cost points. The length band falls back to the raw
    text when there is one and is skipped otherwise, the too-short flag falls back
    to the rendered fields, and no parse-quality penalty or cap applies.
    """

    page_count: int = Field(default=1, ge=0)
    word_count: int | None = Field(default=None, ge=0)
    has_tables: bool = False
    has_images: bool = False
    format: DocumentFormat = "txt"
    parse_quality: ParseQuality | None = None


class ParsedResume(_Frozen):
    """Structured resume as handed over by the text-extraction collaborator."""

    personal: PersonalInfo = Field(default_factory=PersonalInfo)
    experiences: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    projects: list[ProjectEntry] = Field(default_factory=list)
    certifications: list[CertificationEntry] = Field(default_factory=list)
    courses: list[CourseEntry] = Field(default_factory=list)
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)

    def all_bullets(self) -> list[str]:
        return [bullet for experience in self.experiences for bullet in experience.bullets]

    def total_experience_months(self) -> int:
        return sum(experience.duration_months for experience in self.experiences)
