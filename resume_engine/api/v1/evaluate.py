import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import APIRouter, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from resume_engine.core.config import settings
from resume_engine.core.errors import EvaluationError, EvaluationErrorCode, create_error, log_error
from resume_engine.core.rate_limit import rate_limit
from resume_engine.core.result_cache import clear_cache, get_cache_stats
from resume_engine.schemas.api import (
    CacheStatsResponse,
    EvaluateFitRequest,
    EvaluateRequest,
    ParseJobDescriptionRequest,
    RecommendationResponse,
    ScoreResponse,
)
from resume_engine.schemas.evaluation import EvaluationResult
from resume_engine.schemas.fit import FitScore
from resume_engine.schemas.job import ParsedJobRequirements
from resume_engine.services.evaluation_service import (
    evaluate,
    evaluate_fit,
    get_fit_recommendation,
    get_score,
    parse_job,
)

router = APIRouter()

T = TypeVar("T")


def _raise_evaluation_http_error(exc: EvaluationError) -> None:
    raise HTTPException(status_code=exc.status_code, detail=exc.to_user_friendly()) from exc


async def _run_with_timeout(fn: Callable[..., T], *args: Any) -> T:
    """Run blocking evaluation work in the threadpool, bounded by the configured timeout."""
    try:
        return await asyncio.wait_for(
            run_in_threadpool(fn, *args),
            timeout=settings.evaluation_timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        error = create_error(EvaluationErrorCode.TIMEOUT, {"timeout_seconds": settings.evaluation_timeout_seconds})
        log_error(error, "http")
        raise error from exc


@router.post("/evaluate", response_model=EvaluationResult)
@rate_limit()
async def evaluate_resume(request: Request, payload: EvaluateRequest):
    _ = request
    try:
        return await _run_with_timeout(evaluate, payload.resume)
    except EvaluationError as exc:
        _raise_evaluation_http_error(exc)


@router.post("/evaluate/score", response_model=ScoreResponse)
@rate_limit()
async def evaluate_resume_score(request: Request, payload: EvaluateRequest):
    _ = request
    try:
        score = await _run_with_timeout(get_score, payload.resume)
    except EvaluationError as exc:
        _raise_evaluation_http_error(exc)
    return ScoreResponse(score=score)


@router.post("/evaluate-fit", response_model=FitScore)
@rate_limit()
async def evaluate_resume_fit(request: Request, payload: EvaluateFitRequest):
    _ = request
    try:
        return await _run_with_timeout(evaluate_fit, payload.resume, payload.job_description)
    except EvaluationError as exc:
        _raise_evaluation_http_error(exc)


@router.post("/evaluate-fit/recommendation", response_model=RecommendationResponse)
@rate_limit()
async def evaluate_fit_recommendation(request: Request, payload: EvaluateFitRequest):
    _ = request
    try:
        recommendation, fit_score = await _run_with_timeout(
            get_fit_recommendation, payload.resume, payload.job_description
        )
    except EvaluationError as exc:
        _raise_evaluation_http_error(exc)
    return RecommendationResponse(
        recommendation=recommendation.recommendation,
        fit_score=fit_score,
        reasoning=recommendation.reasoning,
    )


@router.post("/job-description/parse", response_model=ParsedJobRequirements)
@rate_limit()
async def parse_job_description_text(request: Request, payload: ParseJobDescriptionRequest):
    _ = request
    try:
        return await _run_with_timeout(parse_job, payload.raw_text)
    except EvaluationError as exc:
        _raise_evaluation_http_error(exc)


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def cache_stats():
    return get_cache_stats()


@router.delete("/cache")
async def cache_clear():
    clear_cache()
    return {"cleared": True}
