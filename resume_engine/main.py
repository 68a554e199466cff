import logging

import sentry_sdk
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from resume_engine.api.v1.evaluate import router as evaluate_router
from resume_engine.api.v1.health import router as health_router
from resume_engine.core.config import settings
from resume_engine.core.config.scoring import get_scoring_config
from resume_engine.core.cors import cors_allow_origin_regex, cors_allowed_origins
from resume_engine.core.rate_limit import limiter
from resume_engine.schemas.evaluation import ENGINE_VERSION

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

# Fail at startup, not on the first request, when the weights do not add up.
get_scoring_config()

app = FastAPI(title="Resume Evaluation & Fit Engine", version=ENGINE_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_origin_regex=cors_allow_origin_regex(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(evaluate_router, prefix="/v1", tags=["Evaluation"])


if __name__ == "__main__":
    uvicorn.run("resume_engine.main:app", host="0.0.0.0", port=8000)
