from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone

from resume_engine.analysis.gap_detection import detect_generic_gaps
from resume_engine.core.config.scoring import get_scoring_value
from resume_engine.core.errors import EvaluationErrorCode, error_boundary
from resume_engine.core.utils import clamp_score, measured_word_count, resume_to_text
from resume_engine.extraction import extract_entities
from resume_engine.schemas.evaluation import (
    DimensionScores,
    EvaluationFeedback,
    EvaluationFlags,
    EvaluationResult,
    ExtractedEntities,
    IdentifiedGaps,
    ProcessingMeta,
    QuickWin,
    ResumeLevel,
    WeakBullet,
)
from resume_engine.schemas.resume import ParsedResume
from resume_engine.taxonomy import LocalTaxonomy, get_default_taxonomy

from .execution_impact import calculate_execution_impact_score
from .learning_adaptivity import calculate_learning_adaptivity_score
from .signal_quality import calculate_signal_quality_score
from .skill_capital import calculate_skill_capital_score

logger = logging.getLogger(__name__)

_MAX_WEAK_BULLETS = 5
_MAX_STRENGTHS = 4
_MAX_CRITICAL_GAPS = 3
_MAX_QUICK_WINS = 4
_MAX_RECOMMENDATIONS = 8

# Dimension issue code -> weakness code.
_ISSUE_TO_WEAKNESS: dict[str, str] = {
    "no_metrics": "no_metrics",
    "missing_metrics": "no_metrics",
    "weak_verbs": "weak_verbs",
    "weak_action_verbs": "weak_verbs",
    "generic_descriptions": "generic_descriptions",
    "poor_formatting": "poor_formatting",
    "few_skills_listed": "few_skills_listed",
    "missing_skills": "few_skills_listed",
    "no_learning_signals": "no_learning_signals",
    "no_experience": "no_experience",
    "no_experience_bullets": "no_experience",
    "resume_too_short": "too_short",
}

_WEAKNESS_MESSAGES: dict[str, str] = {
    "no_metrics": "Add quantified metrics to demonstrate impact (numbers, percentages, dollar amounts)",
    "weak_verbs": "Replace weak verbs (helped, worked on) with strong action verbs (led, achieved, optimized)",
    "generic_descriptions": "Make descriptions specific with concrete outcomes instead of generic duties",
    "poor_formatting": "Improve resume formatting for better readability and ATS compatibility",
    "spelling_errors": "Fix spelling and grammar errors",
    "few_skills_listed": "Add more technical skills to showcase your expertise",
    "no_learning_signals": "Add certifications or courses to show continuous learning",
    "no_experience": "Add work experience or relevant projects",
    "parsing_failed": "Consider a simpler resume format for better parsing",
    "too_short": "Expand your resume with more detail about your experience",
    "possible_spam": "Add more substantive content to your resume",
}

_WEAKNESS_PRIORITIES: dict[str, str] = {
    "no_metrics": "adding quantified metrics",
    "weak_verbs": "using stronger action verbs",
    "generic_descriptions": "making descriptions more specific",
    "poor_formatting": "improving formatting",
    "spelling_errors": "fixing spelling errors",
    "few_skills_listed": "adding more skills",
    "no_learning_signals": "showing continuous learning",
    "no_experience": "adding work experience",
    "parsing_failed": "using a simpler format",
    "too_short": "expanding with more detail",
    "possible_spam": "adding substantive content",
}

_STRENGTH_MESSAGES: dict[str, str] = {
    "skill_capital": "Strong technical skill set with good diversity",
    "execution_impact": "Excellent quantified achievements demonstrating impact",
    "learning_adaptivity": "Clear career progression and commitment to learning",
    "signal_quality": "Well-structured and professionally formatted resume",
}

_STRENGTH_LABELS: dict[str, str] = {
    "skill_capital": "Skill portfolio",
    "execution_impact": "Impact demonstration",
    "learning_adaptivity": "Learning trajectory",
    "signal_quality": "Presentation quality",
}

_SUMMARY_LABELS: dict[str, str] = {
    "skill_capital": "skills",
    "execution_impact": "impact demonstration",
    "learning_adaptivity": "learning trajectory",
    "signal_quality": "presentation",
}

_DIMENSION_RECOMMENDATIONS: dict[str, tuple[str, ...]] = {
    "skill_capital": (
        "Expand your skills section with both technical and soft skills",
        "Include technologies from your project work",
    ),
    "execution_impact": (
        "Start each bullet with a strong action verb",
        "Include at least one metric per bullet point when possible",
        "Focus on outcomes and results, not just duties",
    ),
    "learning_adaptivity": (
        "Consider obtaining industry certifications",
        "Highlight any promotions or increased responsibilities",
    ),
    "signal_quality": (
        "Use a clean, ATS-friendly format",
        "Keep bullets concise (8-25 words)",
        "Ensure consistent formatting throughout",
    ),
}


@dataclass(frozen=True)
class ConstrainedScore:
    score: int
    constraints_applied: list[str]


def get_level(score: float) -> ResumeLevel:
    if score < float(get_scoring_value("levels.growing", 35)):
        return "Early"
    if score < float(get_scoring_value("levels.solid", 55)):
        return "Growing"
    if score < float(get_scoring_value("levels.strong", 75)):
        return "Solid"
    if score < float(get_scoring_value("levels.exceptional", 90)):
        return "Strong"
    return "Exceptional"


def evaluate_generic(
    parsed: ParsedResume,
    raw_text: str | None = None,
    taxonomy: LocalTaxonomy | None = None,
) -> EvaluationResult:
    """Score a resume without job context."""
    started = time.perf_counter()
    taxonomy = taxonomy or get_default_taxonomy()

    with error_boundary(EvaluationErrorCode.DIMENSION_CALCULATION_FAILED):
        extracted = extract_entities(parsed, taxonomy)
        execution_impact, weak_bullets = calculate_execution_impact_score(parsed)
        dimensions = DimensionScores(
            skill_capital=calculate_skill_capital_score(parsed, extracted, taxonomy),
            execution_impact=execution_impact,
            learning_adaptivity=calculate_learning_adaptivity_score(parsed, extracted, taxonomy),
            signal_quality=calculate_signal_quality_score(parsed, raw_text),
        )

    weighted = calculate_global_score(dimensions)
    constrained = apply_constraints(weighted, dimensions, parsed, extracted)
    gaps = detect_generic_gaps(parsed, extracted)
    weaknesses = collect_weaknesses(dimensions, gaps)
    score = constrained.score

    result = EvaluationResult(
        resume_score=score,
        overall_score=score,
        level=get_level(score),
        content_quality_score=clamp_score(
            (dimensions.skill_capital.score + dimensions.execution_impact.score) / 2
        ),
        ats_compatibility_score=dimensions.signal_quality.score,
        format_quality_score=dimensions.signal_quality.score,
        impact_score=dimensions.execution_impact.score,
        dimensions=dimensions,
        constraints_applied=constrained.constraints_applied,
        weaknesses=weaknesses,
        extracted=extracted,
        identified_gaps=gaps,
        weak_bullets=weak_bullets[:_MAX_WEAK_BULLETS],
        feedback=generate_feedback(dimensions, weaknesses, weak_bullets),
        flags=generate_flags(parsed, extracted, gaps, weaknesses, raw_text),
        summary=generate_summary(score, dimensions, weaknesses),
        meta=ProcessingMeta(
            processing_time_ms=round((time.perf_counter() - started) * 1000, 2),
            timestamp=datetime.now(timezone.utc).isoformat(),
            parse_quality=parsed.metadata.parse_quality,
        ),
    )
    logger.info(
        "generic_evaluation score=%s level=%s weighted=%s constraints=%s",
        score,
        result.level,
        weighted,
        ",".join(constrained.constraints_applied) or "none",
    )
    return result


def calculate_global_score(dimensions: DimensionScores) -> int:
    """Weighted sum of the four dimensions, adjusted by presentation quality."""
    weights = get_scoring_value("dimensions.weights", {})
    weighted = sum(
        dimension.score * float(weights.get(name, 0.0)) for name, dimension in dimensions.as_dict().items()
    )

    signal = dimensions.signal_quality.score
    modifier = 1.0
    if signal < float(get_scoring_value("dimensions.signal_modifier.poor_below", 40)):
        modifier = float(get_scoring_value("dimensions.signal_modifier.poor_factor", 0.90))
    elif signal > float(get_scoring_value("dimensions.signal_modifier.excellent_above", 80)):
        modifier = float(get_scoring_value("dimensions.signal_modifier.excellent_factor", 1.05))

    return clamp_score(weighted * modifier)


def apply_constraints(
    score: int,
    dimensions: DimensionScores,
    parsed: ParsedResume,
    extracted: ExtractedEntities,
) -> ConstrainedScore:
    """Hard caps; each fires independently and the lowest applicable cap wins."""
    final = score
    applied: list[str] = []

    def cap(name: str, limit: int) -> None:
        nonlocal final
        if final > limit:
            final = limit
            applied.append(name)

    if dimensions.skill_capital.score < int(get_scoring_value("constraints.low_skill_capital.threshold", 25)):
        cap("low_skill_capital", int(get_scoring_value("constraints.low_skill_capital.max_score", 45)))

    if dimensions.execution_impact.score < int(get_scoring_value("constraints.low_execution_impact.threshold", 20)):
        cap("low_execution_impact", int(get_scoring_value("constraints.low_execution_impact.max_score", 50)))

    if dimensions.learning_adaptivity.score < int(
        get_scoring_value("constraints.stagnant_learning.threshold", 30)
    ) and score > int(get_scoring_value("constraints.stagnant_learning.applies_above", 60)):
        cap("stagnant_learning", int(get_scoring_value("constraints.stagnant_learning.max_score", 60)))

    if parsed.metadata.parse_quality == "low":
        cap("parsing_failed", int(get_scoring_value("constraints.parsing_failed.max_score", 40)))

    if is_possible_spam(parsed, extracted):
        cap("possible_spam", int(get_scoring_value("constraints.possible_spam.max_score", 25)))

    return ConstrainedScore(score=final, constraints_applied=applied)


def is_possible_spam(parsed: ParsedResume, extracted: ExtractedEntities) -> bool:
    max_skills = int(get_scoring_value("constraints.possible_spam.max_skills", 3))
    return len(extracted.skills) < max_skills and not parsed.experiences and not parsed.education


def collect_weaknesses(dimensions: DimensionScores, gaps: IdentifiedGaps) -> list[str]:
    weaknesses: list[str] = []

    def add(code: str) -> None:
        if code not in weaknesses:
            weaknesses.append(code)

    for dimension in dimensions.as_dict().values():
        for issue in dimension.issues:
            if issue in _ISSUE_TO_WEAKNESS:
                add(_ISSUE_TO_WEAKNESS[issue])

    if gaps.missing_skills:
        add("few_skills_listed")
    if gaps.missing_metrics:
        add("no_metrics")
    if gaps.weak_action_verbs:
        add("weak_verbs")
    if gaps.generic_descriptions:
        add("generic_descriptions")
    if gaps.poor_formatting:
        add("poor_formatting")
    return weaknesses


def generate_flags(
    parsed: ParsedResume,
    extracted: ExtractedEntities,
    gaps: IdentifiedGaps,
    weaknesses: list[str],
    raw_text: str | None = None,
) -> EvaluationFlags:
    word_count = measured_word_count(parsed, raw_text)
    if word_count is None:
        word_count = len(resume_to_text(parsed).split())
    return EvaluationFlags(
        no_skills_listed=len(extracted.skills) < 3,
        possible_spam=is_possible_spam(parsed, extracted),
        no_experience=not parsed.experiences,
        generic_descriptions=gaps.generic_descriptions,
        no_metrics=gaps.missing_metrics,
        stagnant="no_learning_signals" in weaknesses,
        parsing_failed=parsed.metadata.parse_quality == "low",
        too_short=word_count < int(get_scoring_value("content.min_word_count", 100)),
    )


# -- feedback ----------------------------------------------------------------


def generate_feedback(
    dimensions: DimensionScores,
    weaknesses: list[str],
    weak_bullets: list[WeakBullet],
) -> EvaluationFeedback:
    return EvaluationFeedback(
        strengths=identify_strengths(dimensions),
        critical_gaps=[_WEAKNESS_MESSAGES[code] for code in weaknesses[:_MAX_CRITICAL_GAPS]],
        quick_wins=identify_quick_wins(dimensions, weaknesses, weak_bullets),
        recommendations=generate_recommendations(dimensions),
    )


def _best_dimension(dimensions: DimensionScores) -> str:
    # Ties keep the later dimension.
    best_name = ""
    best_score = -1
    for name, dimension in dimensions.as_dict().items():
        if dimension.score >= best_score:
            best_name, best_score = name, dimension.score
    return best_name


def _worst_dimension(dimensions: DimensionScores) -> str:
    worst_name = ""
    worst_score = 101
    for name, dimension in dimensions.as_dict().items():
        if dimension.score <= worst_score:
            worst_name, worst_score = name, dimension.score
    return worst_name


def identify_strengths(dimensions: DimensionScores) -> list[str]:
    threshold = int(get_scoring_value("content.strength_threshold", 75))
    strengths = [
        _STRENGTH_MESSAGES[name] for name, dimension in dimensions.as_dict().items() if dimension.score >= threshold
    ]
    if not strengths:
        strengths.append(f"{_STRENGTH_LABELS[_best_dimension(dimensions)]} is your strongest area")
    return strengths[:_MAX_STRENGTHS]


def identify_quick_wins(
    dimensions: DimensionScores,
    weaknesses: list[str],
    weak_bullets: list[WeakBullet],
) -> list[QuickWin]:
    wins: list[QuickWin] = []

    missing_metrics = sum(1 for bullet in weak_bullets if "no_metric" in bullet.issues)
    if missing_metrics:
        wins.append(
            QuickWin(
                action=f"Add metrics to {min(3, missing_metrics)} bullet points",
                estimated_impact="+5-10 points",
                effort="15-30 minutes",
                priority=1,
            )
        )

    weak_verbs = sum(1 for bullet in weak_bullets if "weak_verb" in bullet.issues)
    if weak_verbs:
        wins.append(
            QuickWin(
                action=f"Replace weak verbs in {min(3, weak_verbs)} bullets with strong action verbs",
                estimated_impact="+3-8 points",
                effort="10-15 minutes",
                priority=2,
            )
        )

    if "few_skills_listed" in weaknesses:
        wins.append(
            QuickWin(
                action="Add a dedicated Skills section with 10-15 relevant skills",
                estimated_impact="+5-8 points",
                effort="5-10 minutes",
                priority=3,
            )
        )

    if dimensions.learning_adaptivity.score < int(get_scoring_value("content.recommendation_threshold", 60)):
        wins.append(
            QuickWin(
                action="Add any relevant certifications or online courses",
                estimated_impact="+3-5 points",
                effort="5 minutes",
                priority=4,
            )
        )

    return wins[:_MAX_QUICK_WINS]


def generate_recommendations(dimensions: DimensionScores) -> list[str]:
    threshold = int(get_scoring_value("content.recommendation_threshold", 60))
    recommendations: list[str] = []
    for name, dimension in dimensions.as_dict().items():
        if dimension.score < threshold:
            recommendations.extend(_DIMENSION_RECOMMENDATIONS[name])
    return recommendations[:_MAX_RECOMMENDATIONS]


def generate_summary(score: int, dimensions: DimensionScores, weaknesses: list[str]) -> str:
    strongest = _SUMMARY_LABELS[_best_dimension(dimensions)]
    weakest = _SUMMARY_LABELS[_worst_dimension(dimensions)]

    summary = f"Your resume scores {score}/100, placing it at the {get_level(score)} level. "
    if score >= float(get_scoring_value("levels.strong", 75)):
        summary += f"Your {strongest} stands out."
    elif score >= float(get_scoring_value("levels.solid", 55)):
        summary += f"Good foundation in {strongest}, but {weakest} needs improvement."
    else:
        summary += f"Focus on improving {weakest} for the biggest impact."

    if weaknesses:
        summary += f" Priority: {_WEAKNESS_PRIORITIES[weaknesses[0]]}."
    return summary

