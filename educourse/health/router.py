"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, status
from fastapi.responses import ORJSONResponse

from educourse.config import get_settings
from educourse.core.database import AsyncDatabase, ping_database


router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Liveness probe - checks if the application is running."""
    return {"status": "alive"}


@router.get("/ready")
async def readiness() -> ORJSONResponse:
    """Readiness probe - checks that the database answers queries."""
    settings = get_settings()
    database_ok = AsyncDatabase.is_connected() and await ping_database(
        AsyncDatabase.get_engine()
    )

    return ORJSONResponse(
        status_code=status.HTTP_200_OK
        if database_ok
        else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if database_ok else "unavailable",
            "database": database_ok,
            "environment": settings.environment,
        },
    )


@router.get("")
async def health() -> dict[str, str]:
    """General health check endpoint."""
    settings = get_settings()
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "timestamp": datetime.now(UTC).isoformat(),
    }
