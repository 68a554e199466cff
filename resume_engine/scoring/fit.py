from __future__ import annotations

import logging
import time

from resume_engine.analysis.gap_detection import detect_gaps, summarize_gaps, underqualified_gap_years
from resume_engine.analysis.recommendation import generate_recommendation
from resume_engine.core.config.scoring import get_scoring_value
from resume_engine.core.errors import EvaluationErrorCode, error_boundary
from resume_engine.core.utils import clamp_score
from resume_engine.extraction import extract_entities
from resume_engine.schemas.evaluation import EvaluationResult, WeakBullet
from resume_engine.schemas.fit import (
    ConfidenceLevel,
    FitDimensions,
    FitFlags,
    FitProcessingMeta,
    FitScore,
    GapAnalysis,
    PriorityImprovement,
)
from resume_engine.schemas.job import ParsedJobRequirements
from resume_engine.schemas.resume import ParsedResume
from resume_engine.taxonomy import LocalTaxonomy, get_default_taxonomy

from .execution_impact import calculate_execution_impact_score
from .generic import evaluate_generic

logger = logging.getLogger(__name__)

_MAX_HINTS = 6
_MAX_IMPROVEMENTS = 5
_MAX_WEAK_BULLETS = 5


def calculate_quality_factor(resume_score: float) -> float:
    """1.0 at or above the quality bar, falling linearly to the floor at a score of 0."""
    threshold = float(get_scoring_value("fit.quality_factor.min_resume_score", 60))
    floor = float(get_scoring_value("fit.quality_factor.floor", 0.85))
    if resume_score >= threshold:
        return 1.0
    return floor + (max(0.0, resume_score) / threshold) * (1.0 - floor)


def calculate_fit_dimensions(generic: EvaluationResult, gaps: GapAnalysis) -> FitDimensions:
    technical_weights = get_scoring_value("fit.technical", {})
    technical = gaps.skills.match_percentage * float(
        technical_weights.get("skills", 0.6)
    ) + gaps.tools.match_percentage * float(technical_weights.get("tools", 0.4))

    return FitDimensions(
        technical_match=clamp_score(technical),
        seniority_match=_seniority_match(gaps),
        experience_match=clamp_score(gaps.experience.coverage_score),
        signal_quality=generic.dimensions.signal_quality.score,
    )


def _seniority_match(gaps: GapAnalysis) -> int:
    alignment = gaps.seniority.alignment
    if alignment == "aligned":
        return 100
    if alignment == "overqualified":
        return int(get_scoring_value("fit.seniority.overqualified", 80))

    gap_years = underqualified_gap_years(gaps.seniority)
    floor = float(get_scoring_value("fit.seniority.underqualified_floor", 40))
    step = float(get_scoring_value("fit.seniority.underqualified_step", 15))
    return clamp_score(max(floor, 100 - gap_years * step))


def calculate_fit_score(dimensions: FitDimensions, resume_score: float) -> int:
    weights = get_scoring_value("fit.weights", {})
    raw = (
        dimensions.technical_match * float(weights.get("technical", 0.40))
        + dimensions.seniority_match * float(weights.get("seniority", 0.20))
        + dimensions.experience_match * float(weights.get("experience", 0.20))
        + dimensions.signal_quality * float(weights.get("signal", 0.20))
    )
    return clamp_score(raw * calculate_quality_factor(resume_score))


def generate_fit_flags(gaps: GapAnalysis, resume_score: int) -> FitFlags:
    underqualified = gaps.seniority.alignment == "underqualified"
    career_switch_below = float(get_scoring_value("fit.career_switch_industry_below", 50))
    max_stretch_years = float(get_scoring_value("recommendation.max_seniority_gap_years", 2))
    return FitFlags(
        underqualified=underqualified,
        overqualified=gaps.seniority.alignment == "overqualified",
        career_switch=(
            gaps.industry.match_percentage < career_switch_below
            or len(gaps.experience.missing_types) > len(gaps.experience.matched_types)
        ),
        low_signal=resume_score < int(get_scoring_value("recommendation.min_resume_quality", 60)),
        stretch_role=underqualified and underqualified_gap_years(gaps.seniority) <= max_stretch_years,
    )


def calculate_confidence(requirements: ParsedJobRequirements) -> ConfidenceLevel:
    detail = requirements.detail_count()
    if detail >= int(get_scoring_value("fit.confidence.high", 15)):
        return "high"
    if detail >= int(get_scoring_value("fit.confidence.medium", 8)):
        return "medium"
    return "low"


def generate_tailoring_hints(gaps: GapAnalysis) -> list[str]:
    hints: list[str] = []

    if gaps.skills.critical_missing:
        hints.append(f"Add these key skills if you have them: {', '.join(gaps.skills.critical_missing[:3])}")
    if gaps.skills.transferable:
        hints.append(
            f"Highlight these transferable skills more prominently: {', '.join(gaps.skills.transferable[:3])}"
        )
    if gaps.tools.critical_missing:
        hints.append(f"Mention experience with: {', '.join(gaps.tools.critical_missing[:3])} if applicable")
    if gaps.experience.missing_types:
        readable = [experience_type.replace("_", " ") for experience_type in gaps.experience.missing_types[:2]]
        hints.append(f"Include examples that demonstrate: {' and '.join(readable)}")
    if gaps.industry.keywords_missing:
        hints.append(f"Add industry-relevant keywords: {', '.join(gaps.industry.keywords_missing[:3])}")

    if gaps.seniority.alignment == "underqualified":
        hints.append("Emphasize leadership experience and larger scope projects to appear more senior")
    elif gaps.seniority.alignment == "overqualified":
        hints.append("Consider highlighting specific hands-on technical work to show you're still engaged at this level")

    return hints[:_MAX_HINTS]


def generate_priority_improvements(gaps: GapAnalysis) -> list[PriorityImprovement]:
    improvements: list[PriorityImprovement] = [
        PriorityImprovement(
            type="add_skill",
            target=skill,
            why="This skill is listed as required in the job description",
            estimated_impact=5,
        )
        for skill in gaps.skills.critical_missing[:3]
    ]
    improvements.extend(
        PriorityImprovement(
            type="add_skill",
            target=tool,
            why="This tool is specifically mentioned as required",
            estimated_impact=3,
        )
        for tool in gaps.tools.critical_missing[:2]
    )
    improvements.extend(
        PriorityImprovement(
            type="add_experience",
            target=experience_type,
            why="This type of experience is expected for this role",
            estimated_impact=4,
        )
        for experience_type in gaps.experience.missing_types[:2]
    )
    # Stable sort keeps the skill/tool/experience order among equal impacts.
    improvements.sort(key=lambda improvement: improvement.estimated_impact, reverse=True)
    return improvements[:_MAX_IMPROVEMENTS]


def prioritize_weak_bullets(weak_bullets: list[WeakBullet], requirements: ParsedJobRequirements) -> list[WeakBullet]:
    """Bullets that mention required skills or tools come first."""

    def relevance(bullet: WeakBullet) -> int:
        text = bullet.bullet.lower()
        score = sum(3 for skill in requirements.required_skills if skill.lower() in text)
        score += sum(2 for tool in requirements.required_tools if tool.lower() in text)
        if bullet.location.company:
            score += 1
        return score

    return sorted(weak_bullets, key=relevance, reverse=True)[:_MAX_WEAK_BULLETS]


def evaluate_fit(
    parsed: ParsedResume,
    requirements: ParsedJobRequirements,
    raw_text: str | None = None,
    generic: EvaluationResult | None = None,
    taxonomy: LocalTaxonomy | None = None,
) -> FitScore:
    """Generic evaluation plus gap analysis against one job's requirements.

    A precomputed ``generic`` result (for example from the result cache) is
    reused instead of scoring the resume again.
    """
    started = time.perf_counter()
    taxonomy = taxonomy or get_default_taxonomy()

    if generic is None:
        generic = evaluate_generic(parsed, raw_text, taxonomy)
        extracted = generic.extracted
    else:
        extracted = extract_entities(parsed, taxonomy)
    _, all_weak_bullets = calculate_execution_impact_score(parsed)

    with error_boundary(EvaluationErrorCode.GAP_ANALYSIS_FAILED):
        gaps = detect_gaps(parsed, extracted, requirements, taxonomy)
        gap_summary = summarize_gaps(gaps)
    dimensions = calculate_fit_dimensions(generic, gaps)
    fit_score = calculate_fit_score(dimensions, generic.resume_score)
    fit_flags = generate_fit_flags(gaps, generic.resume_score)
    confidence = calculate_confidence(requirements)
    recommendation = generate_recommendation(
        fit_score, generic.resume_score, gap_summary, fit_flags, gaps, confidence=confidence
    )

    elapsed_ms = round(max(0.0, (time.perf_counter() - started) * 1000), 2)
    meta = generic.meta.model_copy(update={"processing_time_ms": generic.meta.processing_time_ms + elapsed_ms})

    result = FitScore(
        **generic.model_dump(exclude={"weak_bullets", "meta"}),
        weak_bullets=prioritize_weak_bullets(all_weak_bullets, requirements),
        meta=meta,
        fit_score=fit_score,
        fit_dimensions=dimensions,
        gaps=gaps,
        gap_summary=gap_summary,
        fit_flags=fit_flags,
        recommendation=recommendation.recommendation,
        recommendation_reasoning=recommendation.reasoning,
        tailoring_hints=generate_tailoring_hints(gaps),
        priority_improvements=generate_priority_improvements(gaps),
        confidence=confidence,
        fit_meta=FitProcessingMeta(job_parsed_successfully=True, confidence=confidence),
    )
    logger.info(
        "fit_evaluation fit=%s resume=%s recommendation=%s overall_match=%s confidence=%s",
        fit_score,
        generic.resume_score,
        recommendation.recommendation,
        gap_summary.overall_match,
        confidence,
    )
    return result
