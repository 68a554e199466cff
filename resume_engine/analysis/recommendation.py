"""Apply / optimize / not-ready decision for a single job.

NOT_READY conditions are checked first, then APPLY; anything else is
OPTIMIZE_FIRST. Every reasoning string quotes the numbers that drove it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from resume_engine.analysis.gap_detection import underqualified_gap_years
from resume_engine.core.config.scoring import get_scoring_value
from resume_engine.core.utils import round_half_up
from resume_engine.schemas.fit import (
    ConfidenceLevel,
    FitFlags,
    GapAnalysis,
    GapSummary,
    Recommendation,
    RecommendationType,
)

logger = logging.getLogger(__name__)

_MAX_ALTERNATIVES = 4


@dataclass(frozen=True)
class RecommendationThresholds:
    min_resume_quality: int
    apply_fit: int
    apply_max_critical_gaps: int
    apply_fit_with_strong_resume: int
    strong_resume: int
    apply_overall_match: int
    not_ready_critical_gaps: int
    not_ready_fit: int
    not_ready_resume: int
    not_ready_overall_match: int

    @classmethod
    def from_config(cls) -> "RecommendationThresholds":
        def value(key: str, default: int) -> int:
            return int(get_scoring_value(f"recommendation.{key}", default))

        return cls(
            min_resume_quality=value("min_resume_quality", 60),
            apply_fit=value("apply_fit", 75),
            apply_max_critical_gaps=value("apply_max_critical_gaps", 2),
            apply_fit_with_strong_resume=value("apply_fit_with_strong_resume", 65),
            strong_resume=value("strong_resume", 75),
            apply_overall_match=value("apply_overall_match", 80),
            not_ready_critical_gaps=value("not_ready_critical_gaps", 5),
            not_ready_fit=value("not_ready_fit", 50),
            not_ready_resume=value("not_ready_resume", 40),
            not_ready_overall_match=value("not_ready_overall_match", 30),
        )


def generate_recommendation(
    fit_score: int,
    resume_score: int,
    gap_summary: GapSummary,
    fit_flags: FitFlags,
    gaps: GapAnalysis,
    confidence: ConfidenceLevel = "medium",
) -> Recommendation:
    thresholds = RecommendationThresholds.from_config()
    recommendation = determine_recommendation(fit_score, resume_score, gap_summary, fit_flags, thresholds)
    reasoning = generate_reasoning(recommendation, fit_score, resume_score, gap_summary, fit_flags, gaps, thresholds)
    logger.info(
        "recommendation_generated recommendation=%s fit=%s resume=%s critical_gaps=%s overall_match=%s",
        recommendation,
        fit_score,
        resume_score,
        gap_summary.total_critical_gaps,
        gap_summary.overall_match,
    )
    return Recommendation(recommendation=recommendation, reasoning=reasoning, confidence=confidence)


def determine_recommendation(
    fit_score: int,
    resume_score: int,
    gap_summary: GapSummary,
    fit_flags: FitFlags,
    thresholds: RecommendationThresholds | None = None,
) -> RecommendationType:
    thresholds = thresholds or RecommendationThresholds.from_config()
    if should_recommend_not_ready(fit_score, resume_score, gap_summary, fit_flags, thresholds):
        return "NOT_READY"
    if should_recommend_apply(fit_score, resume_score, gap_summary, fit_flags, thresholds):
        return "APPLY"
    return "OPTIMIZE_FIRST"


def should_recommend_not_ready(
    fit_score: int,
    resume_score: int,
    gap_summary: GapSummary,
    fit_flags: FitFlags,
    thresholds: RecommendationThresholds,
) -> bool:
    return (
        gap_summary.total_critical_gaps > thresholds.not_ready_critical_gaps
        or fit_score < thresholds.not_ready_fit
        or (fit_flags.underqualified and fit_flags.career_switch)
        or resume_score < thresholds.not_ready_resume
        or gap_summary.overall_match < thresholds.not_ready_overall_match
    )


def should_recommend_apply(
    fit_score: int,
    resume_score: int,
    gap_summary: GapSummary,
    fit_flags: FitFlags,
    thresholds: RecommendationThresholds,
) -> bool:
    if (
        fit_score >= thresholds.apply_fit
        and resume_score >= thresholds.min_resume_quality
        and gap_summary.total_critical_gaps <= thresholds.apply_max_critical_gaps
    ):
        return True
    if fit_score >= thresholds.apply_fit_with_strong_resume and resume_score >= thresholds.strong_resume:
        return True
    return (
        gap_summary.overall_match >= thresholds.apply_overall_match
        and not fit_flags.underqualified
        and resume_score >= thresholds.min_resume_quality
    )


# -- reasoning ---------------------------------------------------------------


def generate_reasoning(
    recommendation: RecommendationType,
    fit_score: int,
    resume_score: int,
    gap_summary: GapSummary,
    fit_flags: FitFlags,
    gaps: GapAnalysis,
    thresholds: RecommendationThresholds | None = None,
) -> str:
    thresholds = thresholds or RecommendationThresholds.from_config()
    if recommendation == "APPLY":
        return _apply_reasoning(fit_score, resume_score, gap_summary, fit_flags, thresholds)
    if recommendation == "NOT_READY":
        return _not_ready_reasoning(fit_score, resume_score, gap_summary, fit_flags, gaps, thresholds)
    return _optimize_reasoning(fit_score, resume_score, fit_flags, gaps, thresholds)


def _apply_reasoning(
    fit_score: int,
    resume_score: int,
    gap_summary: GapSummary,
    fit_flags: FitFlags,
    thresholds: RecommendationThresholds,
) -> str:
    reasons = [f"Strong fit score of {fit_score}/100 indicates good alignment with this role."]

    if resume_score >= thresholds.strong_resume:
        reasons.append(f"Your resume quality score of {resume_score}/100 is excellent.")
    elif resume_score >= thresholds.min_resume_quality:
        reasons.append(f"Your resume quality score of {resume_score}/100 is solid.")

    if gap_summary.overall_match >= thresholds.apply_overall_match:
        reasons.append(f"{gap_summary.overall_match}% technical match with requirements.")

    if fit_flags.stretch_role:
        reasons.append("While slightly junior for this role, your experience shows growth potential.")

    if gap_summary.total_critical_gaps > 0:
        reasons.append(
            f"Minor gaps in {gap_summary.total_critical_gaps} areas can be addressed in your cover letter."
        )
    return " ".join(reasons)


def _optimize_reasoning(
    fit_score: int,
    resume_score: int,
    fit_flags: FitFlags,
    gaps: GapAnalysis,
    thresholds: RecommendationThresholds,
) -> str:
    reasons: list[str] = []
    improvements: list[str] = []

    if fit_score < thresholds.apply_fit:
        reasons.append(
            f"Fit score of {fit_score}/100 is moderate, so tailoring your resume could significantly "
            "improve your chances."
        )

    if resume_score < thresholds.min_resume_quality:
        reasons.append(f"Your resume quality score of {resume_score}/100 needs improvement.")
        improvements.append("improving resume quality (metrics, action verbs)")

    if gaps.skills.critical_missing:
        improvements.append(f"adding missing skills ({', '.join(gaps.skills.critical_missing[:3])})")

    if gaps.tools.critical_missing:
        improvements.append(f"mentioning experience with {', '.join(gaps.tools.critical_missing[:2])}")

    if fit_flags.underqualified and not fit_flags.stretch_role:
        reasons.append("The role may require more experience than demonstrated in your resume.")
        improvements.append("highlighting leadership and scope of impact")

    if improvements:
        reasons.append(f"Consider {', '.join(improvements)} before applying.")

    reasons.append("These changes could boost your fit score by 10-20 points.")
    return " ".join(reasons)


def _not_ready_reasoning(
    fit_score: int,
    resume_score: int,
    gap_summary: GapSummary,
    fit_flags: FitFlags,
    gaps: GapAnalysis,
    thresholds: RecommendationThresholds,
) -> str:
    reasons = [f"With a fit score of {fit_score}/100, there are significant gaps to address before applying."]
    blockers: list[str] = []

    if gap_summary.overall_match < 40:
        blockers.append(f"only {gap_summary.overall_match}% technical match with requirements")

    if fit_flags.underqualified and fit_flags.career_switch:
        blockers.append("this role requires different experience than your background")
    elif fit_flags.underqualified:
        years = _format_years(underqualified_gap_years(gaps.seniority))
        blockers.append(f"{years}+ years more experience typically expected")

    if resume_score < thresholds.not_ready_resume:
        blockers.append("resume needs significant quality improvements")

    if len(gaps.skills.critical_missing) > thresholds.not_ready_critical_gaps:
        blockers.append(f"{len(gaps.skills.critical_missing)} critical skills are missing")

    if blockers:
        reasons.append(f"Key issues: {'; '.join(blockers)}.")

    reasons.append(
        "Consider targeting roles that better match your current experience, or gain the missing skills first."
    )
    return " ".join(reasons)


def _format_years(years: float) -> str:
    return str(int(years)) if float(years).is_integer() else f"{years:g}"


# -- alternatives and projections -------------------------------------------


def suggest_alternatives(fit_flags: FitFlags, gaps: GapAnalysis) -> list[str]:
    suggestions: list[str] = []

    if fit_flags.overqualified:
        suggestions.append("Consider applying for senior/lead versions of this role")
        suggestions.append("Look for roles with management responsibilities")

    if fit_flags.underqualified:
        suggestions.append("Look for junior/associate versions of this role")
        suggestions.append("Consider internships or entry-level positions in this field")
        suggestions.append("Build missing skills through courses or side projects")

    if fit_flags.career_switch:
        suggestions.append("Target transitional roles that bridge your experience")
        suggestions.append("Highlight transferable skills in your cover letter")
        suggestions.append("Network with people who have made similar transitions")

    if len(gaps.skills.critical_missing) > 3:
        suggestions.append("Take courses in the missing skill areas")
        suggestions.append("Work on projects that demonstrate these skills")

    return suggestions[:_MAX_ALTERNATIVES]


@dataclass(frozen=True)
class PotentialImprovement:
    potential_score: int
    actions: list[str]


def estimate_potential_improvement(current_fit_score: int, gaps: GapAnalysis) -> PotentialImprovement:
    """Projected fit score once the listed gaps are closed."""
    gain = 0
    actions: list[str] = []

    missing_skills = gaps.skills.critical_missing
    if missing_skills:
        skill_gain = min(15, len(missing_skills) * 3)
        gain += skill_gain
        actions.append(f"Add {min(5, len(missing_skills))} missing skills (+{skill_gain} pts)")

    missing_tools = gaps.tools.critical_missing
    if missing_tools:
        tool_gain = min(8, len(missing_tools) * 2)
        gain += tool_gain
        actions.append(f"Mention {min(4, len(missing_tools))} missing tools (+{tool_gain} pts)")

    missing_types = gaps.experience.missing_types
    if missing_types:
        experience_gain = min(10, len(missing_types) * 3)
        gain += experience_gain
        actions.append(f"Highlight {', '.join(missing_types[:2])} experience (+{experience_gain} pts)")

    if len(gaps.industry.keywords_missing) > 2:
        gain += 5
        actions.append("Add industry-relevant keywords (+5 pts)")

    return PotentialImprovement(potential_score=min(100, round_half_up(current_fit_score + gain)), actions=actions)
