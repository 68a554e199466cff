from __future__ import annotations

from resume_engine.core.utils import clamp_score, ladder, round_half_up
from resume_engine.schemas.evaluation import DimensionScore, ExtractedEntities
from resume_engine.schemas.resume import ParsedResume
from resume_engine.taxonomy import LocalTaxonomy, contains_phrase, get_default_taxonomy
from resume_engine.taxonomy.rules import IMPORTANT_SKILL_CATEGORIES

_PRESENCE_MAX = 30
_DIVERSITY_MAX = 40
_DEPTH_MAX = 30

_PRESENCE_LADDER = ((20, 30), (15, 26), (10, 22), (5, 18), (3, 12))
_DIVERSITY_LADDER = ((0.5, 40), (0.35, 34), (0.25, 28), (0.15, 20))
_COUNT_LADDER = ((3, 8), (2, 6), (1, 4))
_YEARS_LADDER = ((8, 7), (5, 5), (2, 3))
_USAGE_LADDER = ((0.5, 7), (0.3, 5), (0.15, 3))

_MONTHS_PER_ROLE_FALLBACK = 24


def calculate_skill_capital_score(
    parsed: ParsedResume,
    extracted: ExtractedEntities,
    taxonomy: LocalTaxonomy | None = None,
) -> DimensionScore:
    taxonomy = taxonomy or get_default_taxonomy()
    issues: list[str] = []

    presence = _skill_presence(parsed, extracted, issues)
    diversity = _skill_diversity(extracted, taxonomy, issues)
    depth = _skill_depth(parsed, extracted, issues)

    return DimensionScore(
        score=clamp_score(presence + diversity + depth),
        breakdown={
            "skill_presence": presence,
            "skill_diversity": diversity,
            "skill_depth": depth,
        },
        issues=issues,
    )


def _skill_presence(parsed: ParsedResume, extracted: ExtractedEntities, issues: list[str]) -> int:
    total = len(set(extracted.skills) | set(extracted.tools))
    score = ladder(total, _PRESENCE_LADDER, 5)
    if total < 3:
        issues.append("missing_skills")
    elif total < 5:
        issues.append("few_skills_listed")

    if parsed.skills:
        score = min(_PRESENCE_MAX, score + 2)
    else:
        issues.append("no_skills_section")
    return score


def _skill_diversity(extracted: ExtractedEntities, taxonomy: LocalTaxonomy, issues: list[str]) -> int:
    categories: set[str] = set()
    for item in [*extracted.skills, *extracted.tools]:
        category = taxonomy.find_skill_category(item)
        if category:
            categories.add(category)

    total_categories = max(1, len(taxonomy.skill_categories))
    ratio = len(categories) / total_categories
    score = ladder(ratio, _DIVERSITY_LADDER, 12)
    if ratio < 0.15:
        issues.append("narrow_skill_set")
    elif ratio < 0.25:
        issues.append("limited_skill_diversity")

    core_present = sum(1 for category in IMPORTANT_SKILL_CATEGORIES if category in categories)
    if core_present < 2:
        issues.append("missing_core_technical_skills")

    if "soft_skills" in categories:
        score = min(_DIVERSITY_MAX, score + 3)
    return score


def estimate_total_years(parsed: ParsedResume, months_per_role: int = _MONTHS_PER_ROLE_FALLBACK) -> float:
    months = parsed.total_experience_months()
    if months == 0 and parsed.experiences:
        months = len(parsed.experiences) * months_per_role
    return months / 12


def _skill_depth(parsed: ParsedResume, extracted: ExtractedEntities, issues: list[str]) -> int:
    score = 0

    certification_points = ladder(len(parsed.certifications), _COUNT_LADDER, 0)
    if certification_points == 0:
        issues.append("no_certifications")
    score += certification_points

    project_points = ladder(len(parsed.projects), _COUNT_LADDER, 0)
    if project_points == 0:
        issues.append("no_projects")
    score += project_points

    years = round_half_up(estimate_total_years(parsed))
    score += ladder(years, _YEARS_LADDER, 1)

    bullets_text = " ".join(parsed.all_bullets()).lower()
    demonstrated = sum(1 for skill in extracted.skills if contains_phrase(bullets_text, skill))
    usage_ratio = demonstrated / max(1, len(extracted.skills))
    usage_points = ladder(usage_ratio, _USAGE_LADDER, 1)
    if usage_points == 1:
        issues.append("skills_not_demonstrated")
    score += usage_points

    return min(_DEPTH_MAX, score)
