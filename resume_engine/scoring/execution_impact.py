from __future__ import annotations

from dataclasses import dataclass

from resume_engine.core.config.scoring import get_scoring_value
from resume_engine.core.utils import clamp_score, ladder, round_half_up
from resume_engine.schemas.evaluation import BulletLocation, DimensionScore, WeakBullet
from resume_engine.schemas.resume import ParsedResume
from resume_engine.taxonomy.rules import (
    GENERIC_DESCRIPTION_PATTERNS,
    SCOPE_PATTERNS,
    has_metric,
    starts_with_strong_verb,
    starts_with_weak_verb,
)

_METRIC_LADDER = ((0.6, 35), (0.45, 30), (0.3, 24), (0.15, 16))
_VERB_LADDER = ((0.7, 35), (0.5, 30), (0.35, 24), (0.2, 16))
_SCOPE_LADDER = ((0.6, 30), (0.4, 25), (0.25, 18), (0.1, 12))
_WEAK_VERB_PENALTY = 8
_LEADERSHIP_CHECK_MIN_BULLETS = 5


@dataclass(frozen=True)
class _Bullet:
    text: str
    company: str
    title: str
    index: int


class _WeakBulletCollector:
    """Merges issue codes for the same bullet location, preserving first-seen order."""

    def __init__(self) -> None:
        self._order: list[tuple[str, str, int]] = []
        self._entries: dict[tuple[str, str, int], tuple[str, list[str]]] = {}

    def add(self, bullet: _Bullet, issue: str) -> None:
        key = (bullet.company, bullet.title, bullet.index)
        if key not in self._entries:
            self._order.append(key)
            self._entries[key] = (bullet.text, [])
        issues = self._entries[key][1]
        if issue not in issues:
            issues.append(issue)

    def to_list(self) -> list[WeakBullet]:
        result: list[WeakBullet] = []
        for key in self._order:
            text, issues = self._entries[key]
            company, title, index = key
            result.append(
                WeakBullet(
                    bullet=text,
                    issues=list(issues),
                    location=BulletLocation(company=company, title=title, index=index),
                )
            )
        return result


def _collect_bullets(parsed: ParsedResume) -> list[_Bullet]:
    return [
        _Bullet(text=bullet, company=experience.company, title=experience.title, index=index)
        for experience in parsed.experiences
        for index, bullet in enumerate(experience.bullets)
    ]


def calculate_execution_impact_score(parsed: ParsedResume) -> tuple[DimensionScore, list[WeakBullet]]:
    bullets = _collect_bullets(parsed)
    if not bullets:
        return (
            DimensionScore(score=0, breakdown={"no_content": 0}, issues=["no_experience_bullets"]),
            [],
        )

    issues: list[str] = []
    weak = _WeakBulletCollector()

    metrics = _metric_score(bullets, issues, weak)
    verbs = _action_verb_score(bullets, issues, weak)
    scope = _scope_score(bullets, issues)

    generic_ratio = _generic_ratio(bullets)
    if generic_ratio > float(get_scoring_value("content.max_generic_ratio", 0.40)):
        issues.append("generic_descriptions")

    return (
        DimensionScore(
            score=clamp_score(metrics + verbs + scope),
            breakdown={
                "metrics_ratio": metrics,
                "action_ratio": verbs,
                "scope_indicators": scope,
                "generic_ratio": round_half_up(generic_ratio * 100),
            },
            issues=issues,
        ),
        weak.to_list(),
    )


def _metric_score(bullets: list[_Bullet], issues: list[str], weak: _WeakBulletCollector) -> int:
    with_metrics = 0
    for bullet in bullets:
        if has_metric(bullet.text):
            with_metrics += 1
        else:
            weak.add(bullet, "no_metric")

    ratio = with_metrics / len(bullets)
    if ratio < float(get_scoring_value("content.min_metric_ratio", 0.30)):
        issues.append("no_metrics")
    return ladder(ratio, _METRIC_LADDER, 8)


def _action_verb_score(bullets: list[_Bullet], issues: list[str], weak: _WeakBulletCollector) -> int:
    strong = 0
    weak_count = 0
    for bullet in bullets:
        if not bullet.text.strip():
            continue
        if starts_with_strong_verb(bullet.text):
            strong += 1
        elif starts_with_weak_verb(bullet.text):
            weak_count += 1
            weak.add(bullet, "weak_verb")

    strong_ratio = strong / len(bullets)
    weak_ratio = weak_count / len(bullets)
    if strong_ratio < float(get_scoring_value("content.min_strong_verb_ratio", 0.50)):
        issues.append("weak_verbs")

    score = ladder(strong_ratio, _VERB_LADDER, 8)
    if weak_ratio > float(get_scoring_value("content.max_weak_verb_ratio", 0.30)):
        score = max(5, score - _WEAK_VERB_PENALTY)
    return score


def _scope_score(bullets: list[_Bullet], issues: list[str]) -> int:
    hits = {category: 0 for category in SCOPE_PATTERNS}
    for bullet in bullets:
        for category, patterns in SCOPE_PATTERNS.items():
            if any(pattern.search(bullet.text) for pattern in patterns):
                hits[category] += 1

    ratio = sum(hits.values()) / len(bullets)
    score = ladder(ratio, _SCOPE_LADDER, 5)
    if score == 5:
        issues.append("low_impact_indicators")
    if hits["leadership"] == 0 and len(bullets) > _LEADERSHIP_CHECK_MIN_BULLETS:
        issues.append("no_leadership_indicators")
    return score


def _generic_ratio(bullets: list[_Bullet]) -> float:
    generic = sum(
        1 for bullet in bullets if any(pattern.search(bullet.text) for pattern in GENERIC_DESCRIPTION_PATTERNS)
    )
    return generic / len(bullets)
