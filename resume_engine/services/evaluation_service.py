from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from resume_engine.core.config import settings
from resume_engine.core.errors import (
    EvaluationError,
    EvaluationErrorCode,
    create_error,
    error_boundary,
    log_error,
)
from resume_engine.core.result_cache import ResultCache, generate_resume_hash, get_result_cache
from resume_engine.parsing import parse_job_description, parse_resume_text
from resume_engine.schemas.api import JobDescriptionInput, ResumeInput
from resume_engine.schemas.evaluation import EvaluationResult
from resume_engine.schemas.fit import FitScore, Recommendation
from resume_engine.schemas.job import ParsedJobRequirements
from resume_engine.schemas.resume import ParsedResume
from resume_engine.scoring import evaluate_fit as score_fit
from resume_engine.scoring import evaluate_generic

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
ResumeLike = ResumeInput | dict[str, Any] | None
JobLike = JobDescriptionInput | dict[str, Any] | None


@dataclass(frozen=True)
class _ResolvedResume:
    parsed: ParsedResume
    raw_text: str | None
    fingerprint: str


def evaluate(resume_input: ResumeLike, cache: ResultCache | None = None) -> EvaluationResult:
    """Generic evaluation, memoized by resume fingerprint."""
    try:
        resume = _resolve_resume(resume_input)
        return _evaluate_cached(resume, cache or get_result_cache())
    except EvaluationError as exc:
        log_error(exc, "evaluate")
        raise


def get_score(resume_input: ResumeLike, cache: ResultCache | None = None) -> int:
    return evaluate(resume_input, cache).resume_score


def evaluate_fit(resume_input: ResumeLike, job_input: JobLike, cache: ResultCache | None = None) -> FitScore:
    """Fit against one job. The generic part comes from the result cache when possible."""
    try:
        resume = _resolve_resume(resume_input)
        requirements = _resolve_job(job_input)
        generic = _evaluate_cached(resume, cache or get_result_cache())
        with error_boundary(EvaluationErrorCode.INTERNAL_ERROR):
            return score_fit(resume.parsed, requirements, raw_text=resume.raw_text, generic=generic)
    except EvaluationError as exc:
        log_error(exc, "evaluate_fit")
        raise


def get_fit_recommendation(
    resume_input: ResumeLike,
    job_input: JobLike,
    cache: ResultCache | None = None,
) -> tuple[Recommendation, int]:
    """The decision without the full report: (recommendation, fit score)."""
    result = evaluate_fit(resume_input, job_input, cache)
    recommendation = Recommendation(
        recommendation=result.recommendation,
        reasoning=result.recommendation_reasoning,
        confidence=result.confidence,
    )
    return recommendation, result.fit_score


def parse_job(job_input: JobLike | str) -> ParsedJobRequirements:
    if isinstance(job_input, str):
        job_input = JobDescriptionInput(raw_text=job_input)
    try:
        return _resolve_job(job_input)
    except EvaluationError as exc:
        log_error(exc, "parse_job")
        raise


# -- input resolution -------------------------------------------------------


def _coerce(model: type[ModelT], value: ModelT | dict[str, Any]) -> ModelT:
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as exc:
        raise create_error(EvaluationErrorCode.VALIDATION_ERROR, exc.errors(include_url=False)) from exc


def _resolve_resume(resume_input: ResumeLike) -> _ResolvedResume:
    if resume_input is None:
        raise create_error(EvaluationErrorCode.MISSING_RESUME)
    resume = _coerce(ResumeInput, resume_input)
    if resume.parsed is None and resume.raw_text is None:
        raise create_error(EvaluationErrorCode.MISSING_RESUME)

    raw_text = resume.raw_text
    if raw_text is not None and len(raw_text) > settings.max_resume_chars:
        raise create_error(
            EvaluationErrorCode.FILE_TOO_LARGE,
            {"size": len(raw_text), "max_size": settings.max_resume_chars},
        )

    if resume.parsed is not None:
        raw_text = raw_text or None
        return _ResolvedResume(resume.parsed, raw_text, resume_fingerprint(resume.parsed, raw_text))

    stripped = (raw_text or "").strip()
    if not stripped:
        raise create_error(EvaluationErrorCode.NO_CONTENT)
    if len(stripped) < settings.min_resume_chars:
        raise create_error(
            EvaluationErrorCode.CONTENT_TOO_SHORT,
            {"extracted_length": len(stripped), "minimum_required": settings.min_resume_chars},
        )
    with error_boundary(EvaluationErrorCode.PARSING_FAILED):
        parsed = parse_resume_text(raw_text or "")
    return _ResolvedResume(parsed, raw_text, resume_fingerprint(None, raw_text))


def _resolve_job(job_input: JobLike) -> ParsedJobRequirements:
    if job_input is None:
        raise create_error(EvaluationErrorCode.MISSING_JOB_DESCRIPTION)
    job = _coerce(JobDescriptionInput, job_input)
    if job.parsed_requirements is not None:
        return job.parsed_requirements
    if not job.raw_text.strip():
        raise create_error(EvaluationErrorCode.MISSING_JOB_DESCRIPTION)
    if len(job.raw_text) > settings.max_job_description_chars:
        raise create_error(
            EvaluationErrorCode.FILE_TOO_LARGE,
            {"size": len(job.raw_text), "max_size": settings.max_job_description_chars},
        )
    with error_boundary(EvaluationErrorCode.JOB_PARSING_FAILED):
        return parse_job_description(job.raw_text)


# -- caching ----------------------------------------------------------------


def resume_fingerprint(parsed: ParsedResume | None, raw_text: str | None) -> str:
    """Raw text alone when no structured resume was supplied, else the canonical parsed JSON plus raw text."""
    if parsed is None:
        return generate_resume_hash(raw_text or "")
    return generate_resume_hash(f"{parsed.model_dump_json()}\x00{raw_text or ''}")


def _evaluate_cached(resume: _ResolvedResume, cache: ResultCache) -> EvaluationResult:
    cached = cache.get(resume.fingerprint)
    if cached is not None:
        logger.debug("evaluation_cache_hit key=%s", resume.fingerprint)
        return cached

    with error_boundary(EvaluationErrorCode.INTERNAL_ERROR):
        result = evaluate_generic(resume.parsed, resume.raw_text)
    cache.set(resume.fingerprint, result)
    logger.debug("evaluation_cache_store key=%s", resume.fingerprint)
    return result
