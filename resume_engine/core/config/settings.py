from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    log_level: str
    sentry_dsn: str | None
    rate_limit: str
    rate_limit_enabled: bool
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    result_cache_ttl_seconds: int
    result_cache_max_size: int
    max_resume_chars: int
    min_resume_chars: int
    max_job_description_chars: int
    evaluation_timeout_seconds: float


settings = Settings(
    log_level=(_get_env("LOG_LEVEL", "INFO") or "INFO").upper(),
    sentry_dsn=_get_env("SENTRY_DSN"),
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        ["http://localhost:3000", "http://127.0.0.1:3000"],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", True),
    result_cache_ttl_seconds=max(1, _get_env_int("RESULT_CACHE_TTL_SECONDS", 300)),
    result_cache_max_size=max(1, _get_env_int("RESULT_CACHE_MAX_SIZE", 1000)),
    max_resume_chars=max(1000, _get_env_int("MAX_RESUME_CHARS", 100_000)),
    min_resume_chars=max(0, _get_env_int("MIN_RESUME_CHARS", 50)),
    max_job_description_chars=max(1000, _get_env_int("MAX_JOB_DESCRIPTION_CHARS", 50_000)),
    evaluation_timeout_seconds=max(0.5, _get_env_float("EVALUATION_TIMEOUT_SECONDS", 10.0)),
)
