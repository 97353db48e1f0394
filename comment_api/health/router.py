"""Health check endpoints."""

from fastapi import APIRouter, Request

from comment_api.config import get_settings
from comment_api.core.database import AsyncCassandraConnection


router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Liveness check: the process is up and serving."""
    return {"status": "alive"}


@router.get("/ready")
async def readiness(request: Request) -> dict[str, str | bool]:
    """Readiness check: the comment service is wired and its store reachable."""
    settings = get_settings()
    ready = getattr(request.app.state, "comment_service", None) is not None
    if ready and settings.comment_store_backend == "cassandra":
        ready = AsyncCassandraConnection.is_connected()
    return {
        "status": "ready" if ready else "starting",
        "environment": settings.environment,
        "store": settings.comment_store_backend,
        "debug": settings.debug,
    }


@router.get("")
async def health() -> dict[str, str]:
    """General health check endpoint."""
    settings = get_settings()
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }
