from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable

from resume_engine.core.config.scoring import get_scoring_value
from resume_engine.core.utils import clamp, round1, round_half_up
from resume_engine.extraction import infer_seniority_from_title
from resume_engine.schemas.evaluation import ExtractedEntities, IdentifiedGaps
from resume_engine.schemas.fit import (
    ExperienceGap,
    GapAnalysis,
    GapSummary,
    IndustryGap,
    SeniorityGap,
    SkillsGap,
    ToolsGap,
)
from resume_engine.schemas.job import SENIORITY_ORDER, ParsedJobRequirements, SeniorityLevel
from resume_engine.schemas.resume import ParsedResume
from resume_engine.taxonomy import LocalTaxonomy, get_default_taxonomy
from resume_engine.taxonomy.rules import (
    EXPERIENCE_TYPE_KEYWORDS,
    GAP_METRIC_RE,
    GENERIC_PHRASES,
    WEAK_ACTION_VERBS,
)

logger = logging.getLogger(__name__)

_DEFAULT_ROLE_LEVEL: SeniorityLevel = "mid"

# Keywords match at a word start so "customer" also finds "customers".
_EXPERIENCE_TYPE_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    experience_type: tuple(re.compile(rf"(?<![a-z0-9]){re.escape(keyword)}") for keyword in keywords)
    for experience_type, keywords in EXPERIENCE_TYPE_KEYWORDS.items()
}


def detect_gaps(
    parsed: ParsedResume,
    extracted: ExtractedEntities,
    requirements: ParsedJobRequirements,
    taxonomy: LocalTaxonomy | None = None,
) -> GapAnalysis:
    taxonomy = taxonomy or get_default_taxonomy()
    gaps = GapAnalysis(
        skills=detect_skills_gap(
            extracted.skills, requirements.required_skills, requirements.preferred_skills, taxonomy
        ),
        tools=detect_tools_gap(extracted.tools, requirements.required_tools, requirements.preferred_tools, taxonomy),
        experience=detect_experience_gap(parsed, requirements.required_experience_types),
        seniority=detect_seniority_gap(parsed, requirements.seniority_expected, requirements.years_experience_min),
        industry=detect_industry_gap(extracted.industries, requirements.domain_keywords),
    )
    logger.debug(
        "gaps_detected skills=%s tools=%s experience=%s seniority=%s industry=%s",
        gaps.skills.match_percentage,
        gaps.tools.match_percentage,
        gaps.experience.coverage_score,
        gaps.seniority.alignment,
        gaps.industry.match_percentage,
    )
    return gaps


def _percentage(matched: int, total: int) -> float:
    if total == 0:
        return 100.0
    return round1(clamp(matched / total * 100))


def _unique_by_key(items: Iterable[str], key_fn: Callable[[str], str]) -> list[tuple[str, str]]:
    """(original, key) pairs, first spelling wins for duplicate keys."""
    seen: set[str] = set()
    pairs: list[tuple[str, str]] = []
    for item in items:
        original = (item or "").strip()
        if not original:
            continue
        key = key_fn(original)
        if key in seen:
            continue
        seen.add(key)
        pairs.append((original, key))
    return pairs


def detect_skills_gap(
    extracted_skills: list[str],
    required_skills: list[str],
    preferred_skills: list[str] | None = None,
    taxonomy: LocalTaxonomy | None = None,
) -> SkillsGap:
    taxonomy = taxonomy or get_default_taxonomy()

    def key(skill: str) -> str:
        return taxonomy.normalize_skill(skill).lower()

    have = {key(skill) for skill in extracted_skills}
    required = _unique_by_key(required_skills, key)

    matched = [original for original, skill in required if skill in have]
    critical_missing = [original for original, skill in required if skill not in have]
    nice_to_have_missing = [
        original for original, skill in _unique_by_key(preferred_skills or [], key) if skill not in have
    ]

    return SkillsGap(
        matched=matched,
        critical_missing=critical_missing,
        nice_to_have_missing=nice_to_have_missing,
        transferable=taxonomy.find_transferable_skills(extracted_skills, critical_missing),
        match_percentage=_percentage(len(matched), len(required)),
    )


def detect_tools_gap(
    extracted_tools: list[str],
    required_tools: list[str],
    preferred_tools: list[str] | None = None,
    taxonomy: LocalTaxonomy | None = None,
) -> ToolsGap:
    taxonomy = taxonomy or get_default_taxonomy()

    def key(tool: str) -> str:
        return (taxonomy.normalize_tool(tool) or tool).lower()

    have = {key(tool) for tool in extracted_tools}
    required = _unique_by_key(required_tools, key)

    matched = [original for original, tool in required if tool in have]
    critical_missing = [original for original, tool in required if tool not in have]
    nice_to_have_missing = [
        original for original, tool in _unique_by_key(preferred_tools or [], key) if tool not in have
    ]

    return ToolsGap(
        matched=matched,
        critical_missing=critical_missing,
        nice_to_have_missing=nice_to_have_missing,
        match_percentage=_percentage(len(matched), len(required)),
    )


def extract_experience_types(bullets: Iterable[str]) -> list[str]:
    found: set[str] = set()
    for bullet in bullets:
        lowered = bullet.lower()
        for experience_type, patterns in _EXPERIENCE_TYPE_PATTERNS.items():
            if any(pattern.search(lowered) for pattern in patterns):
                found.add(experience_type)
    return [experience_type for experience_type in EXPERIENCE_TYPE_KEYWORDS if experience_type in found]


def detect_experience_gap(parsed: ParsedResume, required_types: Iterable[str]) -> ExperienceGap:
    detected = [experience_type.lower() for experience_type in extract_experience_types(parsed.all_bullets())]

    matched: list[str] = []
    missing: list[str] = []
    required = [experience_type.lower() for experience_type in required_types]
    for experience_type in required:
        if any(experience_type in found or found in experience_type for found in detected):
            matched.append(experience_type)
        else:
            missing.append(experience_type)

    return ExperienceGap(
        matched_types=matched,
        missing_types=missing,
        coverage_score=_percentage(len(matched), len(required)),
    )


def estimate_total_years_experience(parsed: ParsedResume) -> int:
    months = parsed.total_experience_months()
    if months == 0 and parsed.experiences:
        months = len(parsed.experiences) * int(get_scoring_value("gaps.months_per_role_fallback", 30))
    return round_half_up(months / 12)


def estimate_user_seniority(parsed: ParsedResume) -> SeniorityLevel:
    if not parsed.experiences:
        return "entry"

    title_level = infer_seniority_from_title(parsed.experiences[0].title)
    years = estimate_total_years_experience(parsed)
    if title_level == "lead" or years >= 10:
        return "lead"
    if title_level == "senior" or years >= 5:
        return "senior"
    if years >= 2:
        return "mid"
    return "entry"


def estimate_years_gap(user_level: SeniorityLevel, role_level: SeniorityLevel) -> float:
    difference = SENIORITY_ORDER.index(role_level) - SENIORITY_ORDER.index(user_level)
    if difference <= 0:
        return 0.0
    return difference * float(get_scoring_value("gaps.years_per_level", 2.5))


def detect_seniority_gap(
    parsed: ParsedResume,
    role_expected: SeniorityLevel | None = None,
    min_years_required: float | None = None,
) -> SeniorityGap:
    user_level = estimate_user_seniority(parsed)
    expected = role_expected or _DEFAULT_ROLE_LEVEL

    user_rank = SENIORITY_ORDER.index(user_level)
    role_rank = SENIORITY_ORDER.index(expected)

    gap_years: float | None = None
    if user_rank < role_rank:
        alignment = "underqualified"
        gap_years = estimate_years_gap(user_level, expected)
    elif user_rank > role_rank:
        alignment = "overqualified"
    else:
        alignment = "aligned"

    if min_years_required and alignment == "aligned":
        years = estimate_total_years_experience(parsed)
        if years < min_years_required:
            alignment = "underqualified"
            gap_years = float(min_years_required - years)

    return SeniorityGap(
        user_level=user_level,
        role_expected=expected,
        alignment=alignment,
        gap_years=gap_years,
    )


def underqualified_gap_years(gap: SeniorityGap) -> float:
    """Years short of the role; a missing estimate counts as the configured default."""
    if gap.gap_years is not None:
        return gap.gap_years
    return float(get_scoring_value("fit.seniority.default_gap_years", 2))


def detect_industry_gap(extracted_industries: list[str], domain_keywords: list[str]) -> IndustryGap:
    if not domain_keywords:
        return IndustryGap(keywords_matched=list(extracted_industries), keywords_missing=[], match_percentage=100)

    industries = {industry.lower() for industry in extracted_industries}
    matched: list[str] = []
    missing: list[str] = []
    for keyword in (keyword.lower() for keyword in domain_keywords):
        if any(keyword in industry or industry in keyword for industry in industries):
            matched.append(keyword)
        else:
            missing.append(keyword)

    return IndustryGap(
        keywords_matched=matched,
        keywords_missing=missing,
        match_percentage=_percentage(len(matched), len(domain_keywords)),
    )


def summarize_gaps(gaps: GapAnalysis) -> GapSummary:
    areas: list[str] = []
    total = 0

    if gaps.skills.critical_missing:
        areas.append("skills")
        total += len(gaps.skills.critical_missing)
    if gaps.tools.critical_missing:
        areas.append("tools")
        total += len(gaps.tools.critical_missing)
    if gaps.experience.missing_types:
        areas.append("experience")
        total += len(gaps.experience.missing_types)
    if gaps.seniority.alignment == "underqualified":
        areas.append("seniority")
        total += 1
    if gaps.industry.match_percentage < float(get_scoring_value("gaps.low_industry_match", 50)):
        areas.append("industry")
        total += len(gaps.industry.keywords_missing)

    weights = get_scoring_value("gaps.weights", {})
    seniority_points = (
        get_scoring_value("gaps.seniority_weight_aligned", 100)
        if gaps.seniority.alignment == "aligned"
        else get_scoring_value("gaps.seniority_weight_misaligned", 60)
    )
    overall = (
        gaps.skills.match_percentage * float(weights.get("skills", 0.4))
        + gaps.tools.match_percentage * float(weights.get("tools", 0.2))
        + gaps.experience.coverage_score * float(weights.get("experience", 0.2))
        + float(seniority_points) * float(weights.get("seniority", 0.1))
        + gaps.industry.match_percentage * float(weights.get("industry", 0.1))
    )

    return GapSummary(
        total_critical_gaps=total,
        critical_areas=areas,
        overall_match=int(clamp(round_half_up(overall))),
    )


def detect_generic_gaps(parsed: ParsedResume, extracted: ExtractedEntities) -> IdentifiedGaps:
    """Job-independent weaknesses used by the generic evaluation."""
    bullets = parsed.all_bullets()
    total = len(bullets)
    lowered = [bullet.lower() for bullet in bullets]

    with_metrics = sum(1 for bullet in bullets if GAP_METRIC_RE.search(bullet))
    weak_leads = sum(1 for bullet in lowered if any(bullet.startswith(verb) for verb in WEAK_ACTION_VERBS))
    generic = sum(1 for bullet in lowered if any(phrase in bullet for phrase in GENERIC_PHRASES))

    return IdentifiedGaps(
        missing_skills=len(extracted.skills) < int(get_scoring_value("content.min_skills_count", 5)),
        missing_metrics=with_metrics < total * float(get_scoring_value("content.min_metric_ratio", 0.30)),
        weak_action_verbs=weak_leads > total * 0.5,
        generic_descriptions=generic > total * float(get_scoring_value("content.max_generic_ratio", 0.40)),
        poor_formatting=parsed.metadata.parse_quality == "low",
        no_education=not parsed.education,
        # No spell-checker is wired in.
        spelling_errors=False,
    )
