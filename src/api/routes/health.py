"""
Health Check Routes - System health and monitoring endpoints.

These endpoints are used for:
1. Load balancer health checks
2. Container liveness/readiness checks
3. Monitoring systems
"""
from datetime import datetime

from fastapi import APIRouter, Depends, Response, status
from starlette.concurrency import run_in_threadpool

from src.api.dependencies import get_service
from src.core.logging_config import get_logger
from src.models.bank import HealthResponse
from src.services.directory_service import DirectoryService

logger = get_logger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)

# Application version - would typically come from package metadata
APP_VERSION = "1.0.0"


def _store_health(healthy: bool, response: Response, ok_status: str) -> HealthResponse:
    if healthy:
        return HealthResponse(
            status=ok_status,
            version=APP_VERSION,
            store="ok",
            timestamp=datetime.utcnow()
        )

    logger.warning("Record store is unreachable")
    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(
        status="unhealthy",
        version=APP_VERSION,
        store="unreachable",
        timestamp=datetime.utcnow()
    )


@router.get(
    "",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse, "description": "Record store unreachable"}},
    summary="Health check endpoint",
    description="""
    Returns the current health status of the service.

    Returns 200 OK when the record store answers a ping, 503 otherwise.
    """
)
async def health_check(
    response: Response,
    service: DirectoryService = Depends(get_service),
) -> HealthResponse:
    """Ping the record store."""
    logger.debug("Health check requested")
    healthy = await run_in_threadpool(service.is_healthy)
    return _store_health(healthy, response, "healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse, "description": "Record store unreachable"}},
    summary="Readiness check endpoint",
    description="Returns whether the service is ready to accept requests."
)
async def readiness_check(
    response: Response,
    service: DirectoryService = Depends(get_service),
) -> HealthResponse:
    logger.debug("Readiness check requested")
    healthy = await run_in_threadpool(service.is_healthy)
    return _store_health(healthy, response, "ready")
