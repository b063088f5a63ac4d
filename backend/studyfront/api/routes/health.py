"""Health & Readiness Probes.

Invariants:
    - GET /health/ returns 200 while the process is up (liveness)
    - GET /health/ready returns 503 when the database does not answer;
      otherwise 200, reporting which moderation and quiz paths are active
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from studyfront.config import get_settings
from studyfront.infrastructure import database

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": "studyfront-api", "version": "1.0.0"}


@router.get("/ready")
async def readiness_check():
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    settings = get_settings()
    return {
        "status": "ready",
        "checks": {
            "database": "healthy",
            "moderation": "remote" if settings.moderation_api_key else "keywords",
            "quiz": "anthropic" if settings.anthropic_api_key else "fallback",
        },
    }
