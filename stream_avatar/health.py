"""
Health check endpoints.

Provides liveness and readiness probes for container orchestration.
"""

from fastapi import APIRouter, HTTPException

from .config import settings
from .platform_client import PlatformClient
from .schemas import HealthResponse
from .sessions import get_store

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description="Returns service health status and configuration info"
)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        service=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
        platform_base_url=settings.UNITH_API_BASE_URL,
        sessions=len(get_store()),
    )


@router.get(
    "/health/live",
    summary="Liveness probe",
    description="Simple check that the service is running"
)
async def liveness():
    return {"status": "alive"}


@router.get(
    "/health/ready",
    summary="Readiness probe",
    description="Check that the platform API is reachable"
)
async def readiness():
    """
    Readiness probe.

    Returns 200 if the platform API answers, 503 if not.
    """
    checks = {"platform": await PlatformClient().health_check()}

    if not all(checks.values()):
        raise HTTPException(
            status_code=503,
            detail={"status": "not_ready", "checks": checks},
        )

    return {"status": "ready", "checks": checks}
