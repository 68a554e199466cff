from __future__ import annotations

from resume_engine.core.utils import clamp_score, ladder
from resume_engine.schemas.evaluation import DimensionScore, ExtractedEntities
from resume_engine.schemas.resume import ExperienceEntry, ParsedResume
from resume_engine.taxonomy import LocalTaxonomy, contains_phrase, get_default_taxonomy
from resume_engine.taxonomy.rules import (
    DEFAULT_TITLE_RANK,
    LEARNING_SIGNAL_PATTERNS,
    SCOPE_EXPANSION_PATTERNS,
    TITLE_SENIORITY_RANKS,
)

# Raw points: 30 recency + 30 progression + 25 learning, normalized to 100.
_RAW_MAX = 85
_PROGRESSION_MAX = 30
_LEARNING_MAX = 25
_STAGNATION_MAX = 15

_RECENCY_STEPS = ((8, 0.4, 30), (5, 0.3, 25), (3, 0.2, 18))
_CERTIFICATION_LADDER = ((3, 15), (2, 12), (1, 8))
_COURSE_LADDER = ((3, 5), (1, 3))

_STEP_UP_POINTS = 4
_TITLE_PROGRESSION_MAX = 12
_SAME_COMPANY_PROMOTION_POINTS = 8
_PROMOTION_MENTION_POINTS = 2
_PROMOTION_MENTIONS_MAX = 5
_LEARNING_MENTIONS_MAX = 5

_LONG_TENURE_MONTHS = 84
_NO_LEARNING_YEARS = 5

_SCALE_MULTIPLIERS = {"million": 1_000_000, "m": 1_000_000, "k": 1_000}


def calculate_learning_adaptivity_score(
    parsed: ParsedResume,
    extracted: ExtractedEntities,
    taxonomy: LocalTaxonomy | None = None,
) -> DimensionScore:
    taxonomy = taxonomy or get_default_taxonomy()
    issues: list[str] = []

    recency = _skill_recency(extracted, taxonomy, issues)
    progression = _progression(parsed, issues)
    learning = _learning_signals(parsed, issues)
    penalty = _stagnation_penalty(parsed, extracted, taxonomy, issues)

    raw = max(0, recency + progression + learning - penalty)
    return DimensionScore(
        score=clamp_score(raw / _RAW_MAX * 100),
        breakdown={
            "skill_recency": recency,
            "progression": progression,
            "learning_signals": learning,
            "stagnation_penalty": penalty,
        },
        issues=issues,
    )


def _lowered_inventory(extracted: ExtractedEntities) -> set[str]:
    return {item.lower() for item in [*extracted.skills, *extracted.tools]}


def _skill_recency(extracted: ExtractedEntities, taxonomy: LocalTaxonomy, issues: list[str]) -> int:
    inventory = _lowered_inventory(extracted)
    modern = sum(1 for tech in taxonomy.recent_tech if tech.lower() in inventory)
    ratio = modern / len(inventory) if inventory else 0.0

    for min_count, min_ratio, score in _RECENCY_STEPS:
        if modern >= min_count or ratio >= min_ratio:
            return score
    if modern >= 1:
        issues.append("limited_modern_skills")
        return 12
    issues.append("no_modern_skills")
    return 5


def title_rank(title: str) -> int:
    lowered = (title or "").lower()
    rank = DEFAULT_TITLE_RANK
    for keyword, level in TITLE_SENIORITY_RANKS.items():
        if contains_phrase(lowered, keyword):
            rank = max(rank, level)
    return rank


def _progression(parsed: ParsedResume, issues: list[str]) -> int:
    score = 0
    experiences = parsed.experiences

    if len(experiences) >= 2:
        title_points, promoted, same_company = _title_progression(experiences)
        score += min(_TITLE_PROGRESSION_MAX, title_points)
        if promoted and same_company:
            score += _SAME_COMPANY_PROMOTION_POINTS

    mentions = sum(
        1
        for bullet in parsed.all_bullets()
        if any(pattern.search(bullet) for pattern in LEARNING_SIGNAL_PATTERNS["progression"])
    )
    score += min(_PROMOTION_MENTIONS_MAX, mentions * _PROMOTION_MENTION_POINTS)
    score += _scope_expansion(experiences)

    score = min(_PROGRESSION_MAX, score)
    if len(experiences) >= 3 and score < 10:
        issues.append("no_clear_progression")
    return score


def _title_progression(experiences: list[ExperienceEntry]) -> tuple[int, bool, bool]:
    """Experiences are most recent first; each step up to a higher rank scores."""
    points = 0
    promoted = False
    same_company_promotion = False
    for current, previous in zip(experiences, experiences[1:]):
        if title_rank(current.title) > title_rank(previous.title):
            promoted = True
            points += _STEP_UP_POINTS
            if current.company == previous.company:
                same_company_promotion = True
    return points, promoted, same_company_promotion


def _scope_numbers(text: str) -> list[int]:
    numbers: list[int] = []
    for pattern in SCOPE_EXPANSION_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        value = int(match.group(1))
        unit = (match.group(2) or "").lower() if pattern.groups >= 2 else ""
        numbers.append(value * _SCALE_MULTIPLIERS.get(unit, 1))
    return numbers


def _scope_expansion(experiences: list[ExperienceEntry]) -> int:
    if len(experiences) < 2:
        return 0
    recent = max([0, *_scope_numbers(" ".join(experiences[0].bullets))])
    older = max([0, *_scope_numbers(" ".join(b for e in experiences[1:] for b in e.bullets))])
    if recent > older * 1.5 and recent > 0:
        return 5
    if recent > older:
        return 3
    return 0


def _learning_signals(parsed: ParsedResume, issues: list[str]) -> int:
    certifications = len(parsed.certifications)
    courses = len(parsed.courses)
    score = ladder(certifications, _CERTIFICATION_LADDER, 0) + ladder(courses, _COURSE_LADDER, 0)

    mentions = 0
    for bullet in parsed.all_bullets():
        for group in ("certifications", "courses", "new_skills"):
            if any(pattern.search(bullet) for pattern in LEARNING_SIGNAL_PATTERNS[group]):
                mentions += 1
    score += min(_LEARNING_MENTIONS_MAX, mentions)

    if certifications == 0 and courses == 0 and mentions == 0:
        issues.append("no_learning_signals")
    return min(_LEARNING_MAX, score)


def _stagnation_penalty(
    parsed: ParsedResume,
    extracted: ExtractedEntities,
    taxonomy: LocalTaxonomy,
    issues: list[str],
) -> int:
    penalty = 0
    inventory = _lowered_inventory(extracted)

    has_legacy = any(tech.lower() in inventory for tech in taxonomy.legacy_tech)
    has_modern = any(tech.lower() in inventory for tech in taxonomy.recent_tech)
    if has_legacy and not has_modern:
        penalty += 10
        issues.append("legacy_tech_only")

    if parsed.experiences and parsed.experiences[0].duration_months > _LONG_TENURE_MONTHS:
        penalty += 5
        issues.append("same_role_too_long")

    total_years = parsed.total_experience_months() / 12
    if total_years >= _NO_LEARNING_YEARS and not parsed.certifications and not parsed.courses:
        penalty += 3
        issues.append("no_recent_learning")

    return min(_STAGNATION_MAX, penalty)
