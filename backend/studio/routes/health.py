"""
EdAiVi Studio Backend: Health and Service Routes
================================================

What:  Liveness check, API index and runtime status.
Who:   Docker health checks and load balancers (/health), humans and
       dashboards (/api, /api/status).

    GET /health      → 200 healthy / 503 unhealthy
    GET /api         → endpoint prefixes by area
    GET /api/status  → uptime, environment, document counts
"""

import logging
import time

from fastapi import APIRouter, Response, status

from studio import __version__
from studio.config import settings
from studio.dependencies import StoreDep
from studio.models import utcnow
from studio.schemas.common import ApiIndexResponse, HealthResponse, StatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()

API_ENDPOINTS = {
    "auth": ["/api/auth"],
    "ai": ["/api/ai/models", "/api/ai/generate", "/api/ai/credits"],
    "projects": ["/api/audio", "/api/video", "/api/scene", "/api/avatar"],
    "streams": ["/api/stream"],
    "realtime": ["/ws"],
    "service": ["/health", "/api/status"],
}


def uptime_seconds() -> float:
    return round(time.time() - _start_time, 2)


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Document store unavailable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(store: StoreDep, response: Response) -> HealthResponse:
    """Healthy when the document store answers a count on every repository."""
    store_status = "available"
    overall = "healthy"
    try:
        for repo in store.repositories():
            await repo.count()
    except Exception as e:
        store_status = "unavailable"
        overall = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Health check: document store unreachable: %s", e)

    return HealthResponse(
        status=overall,
        store=store_status,
        version=__version__,
        uptime_seconds=uptime_seconds(),
    )


@router.get("/api", response_model=ApiIndexResponse, summary="API index")
async def api_index() -> ApiIndexResponse:
    return ApiIndexResponse(name=settings.app_name, version=__version__, endpoints=API_ENDPOINTS)


@router.get("/api/status", response_model=StatusResponse, summary="Runtime status")
async def api_status(store: StoreDep) -> StatusResponse:
    return StatusResponse(
        status="running",
        uptime_seconds=uptime_seconds(),
        environment=settings.environment,
        timestamp=utcnow(),
        documents=store.stats(),
    )
