from __future__ import annotations

import re

from resume_engine.schemas.evaluation import ExtractedEntities
from resume_engine.schemas.job import SeniorityLevel
from resume_engine.schemas.resume import ParsedResume
from resume_engine.taxonomy import LocalTaxonomy, contains_phrase, get_default_taxonomy
from resume_engine.taxonomy.rules import (
    SENIORITY_TITLE_KEYWORDS,
    TITLE_ABBREVIATIONS,
    VAGUE_PHRASES,
    has_metric,
    starts_with_weak_verb,
)

_SAMPLE_ROLES = 2
_SAMPLE_BULLETS_PER_ROLE = 3
_SAMPLE_MIN_CHARS = 20
_SAMPLE_LIMIT = 5
_SHORT_BULLET_WORDS = 8


def extract_entities(parsed: ParsedResume, taxonomy: LocalTaxonomy | None = None) -> ExtractedEntities:
    taxonomy = taxonomy or get_default_taxonomy()
    companies = _extract_companies(parsed)
    return ExtractedEntities(
        skills=_extract_skills(parsed, taxonomy),
        tools=_extract_tools(parsed, taxonomy),
        titles=_extract_titles(parsed),
        companies=companies,
        industries=_infer_industries(parsed, companies, taxonomy),
        bullets_sample=_sample_bullets(parsed),
        certifications=[certification.name for certification in parsed.certifications],
    )


def _extract_skills(parsed: ParsedResume, taxonomy: LocalTaxonomy) -> list[str]:
    skills: set[str] = set(taxonomy.normalize_skills(parsed.skills))

    for bullet in parsed.all_bullets():
        skills.update(taxonomy.detect_skills(bullet))

    for project in parsed.projects:
        skills.update(taxonomy.normalize_skills(project.technologies))
        skills.update(taxonomy.detect_skills(project.description))

    for certification in parsed.certifications:
        skills.update(taxonomy.skills_for_certification(certification.name))

    return sorted(skills)


def _extract_tools(parsed: ParsedResume, taxonomy: LocalTaxonomy) -> list[str]:
    sources: list[str] = list(parsed.all_bullets())
    for project in parsed.projects:
        sources.append(project.description)
        sources.append(" ".join(project.technologies))
    sources.append(" ".join(parsed.skills))

    tools: set[str] = set(taxonomy.detect_tools(" \n ".join(sources)))
    for skill in parsed.skills:
        tool = taxonomy.normalize_tool(skill)
        if tool:
            tools.add(tool)
    return sorted(tools)


def normalize_title(raw_title: str) -> str:
    title = (raw_title or "").strip()
    for pattern, replacement in TITLE_ABBREVIATIONS:
        title = pattern.sub(replacement, title)
    return re.sub(r"\s+", " ", title).strip()


def _extract_titles(parsed: ParsedResume) -> list[str]:
    titles: list[str] = []
    for experience in parsed.experiences:
        title = normalize_title(experience.title)
        if title and title not in titles:
            titles.append(title)
    return titles


def infer_seniority_from_title(title: str) -> SeniorityLevel:
    lowered = (title or "").lower()
    for level in ("lead", "senior", "entry"):
        if any(contains_phrase(lowered, keyword) for keyword in SENIORITY_TITLE_KEYWORDS[level]):
            return level  # type: ignore[return-value]
    return "mid"


def _extract_companies(parsed: ParsedResume) -> list[str]:
    companies: list[str] = []
    for experience in parsed.experiences:
        if experience.company and experience.company not in companies:
            companies.append(experience.company)
    return companies


def _infer_industries(parsed: ParsedResume, companies: list[str], taxonomy: LocalTaxonomy) -> list[str]:
    industries = set(taxonomy.extract_industries_from_companies(companies))
    industries.update(taxonomy.detect_industries(" ".join(parsed.all_bullets())))
    if parsed.projects:
        industries.update(taxonomy.detect_industries(" ".join(project.description for project in parsed.projects)))
    return sorted(industries)


def _sample_bullets(parsed: ParsedResume) -> list[str]:
    samples: list[str] = []
    for experience in parsed.experiences[:_SAMPLE_ROLES]:
        for bullet in experience.bullets[:_SAMPLE_BULLETS_PER_ROLE]:
            if len(bullet) > _SAMPLE_MIN_CHARS and len(samples) < _SAMPLE_LIMIT:
                samples.append(bullet)
    return samples


def analyze_bullet_quality(bullet: str) -> list[str]:
    """Issue codes for a single bullet: weak_verb, no_metric, vague, too_short."""
    issues: list[str] = []
    lowered = bullet.lower()
    if starts_with_weak_verb(bullet):
        issues.append("weak_verb")
    if not has_metric(bullet):
        issues.append("no_metric")
    if any(contains_phrase(lowered, phrase) for phrase in VAGUE_PHRASES):
        issues.append("vague")
    if len(bullet.split()) < _SHORT_BULLET_WORDS:
        issues.append("too_short")
    return issues
