from fastapi import APIRouter

from resume_engine.schemas.evaluation import ENGINE_VERSION

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    return {"status": "healthy", "engine_version": ENGINE_VERSION}
