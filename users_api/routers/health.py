"""Service metadata, liveness and readiness endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from users_api.database import check_connection

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/")
async def root(request: Request) -> dict[str, str]:
    """Describe the running service."""
    settings = request.app.state.settings
    return {
        "message": f"{settings.app_name} is running",
        "name": settings.app_name,
        "version": settings.app_version,
        "timestamp": _timestamp(),
    }


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness probe. Returns 200 whenever the process is up."""
    return {"status": "healthy", "timestamp": _timestamp()}


@router.get("/health/ready")
def readiness_check(request: Request):
    """Readiness probe, including database connectivity."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None or not check_connection(engine):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
                "timestamp": _timestamp(),
            },
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "timestamp": _timestamp(),
    }
