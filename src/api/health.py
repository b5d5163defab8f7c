"""
Gita-Guidance-Service - Health API Routes

GET /health: liveness probe
GET /ready: readiness probe, 503 until the verse corpus is loaded

Patterns Applied:
- Health Check Pattern
- HealthService class with Repository pattern
- Pydantic response models per FastAPI best practices
"""

from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.core.config import get_settings
from src.core.logging import get_logger
from src.corpus.loader import get_corpus, is_corpus_loaded

router = APIRouter(tags=["health"])

logger = get_logger(__name__)


# =============================================================================
# Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    version: str
    service: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""
    status: str
    checks: dict[str, bool]
    verse_count: int = 0


# =============================================================================
# Health Service
# =============================================================================


class HealthService:
    """Service class for health check operations.

    Readiness follows the corpus loader: the service can answer only once
    the verse fixture is in memory.
    """

    def __init__(self, service_name: str, version: str):
        self._service_name = service_name
        self._version = version

    def check_health(self) -> dict[str, Any]:
        """Check basic service health."""
        return {
            "status": "healthy",
            "version": self._version,
            "service": self._service_name,
        }

    def check_readiness(self) -> tuple[dict[str, Any], bool]:
        """Check if service is ready to accept requests.

        Returns:
            Tuple of (readiness dict, is_ready bool)
        """
        corpus_loaded = is_corpus_loaded()
        verse_count = len(get_corpus()) if corpus_loaded else 0

        checks = {
            "corpus_loaded": corpus_loaded,
            "corpus_non_empty": verse_count > 0,
        }

        is_ready = all(checks.values())
        result: dict[str, Any] = {
            "status": "ready" if is_ready else "not_ready",
            "checks": checks,
            "verse_count": verse_count,
        }
        return result, is_ready

    def configure(self, service_name: str, version: str) -> None:
        """Set the reported identity. Called by the lifespan handler."""
        self._service_name = service_name
        self._version = version


_settings = get_settings()
_health_service = HealthService(
    service_name=_settings.service_name,
    version=_settings.version,
)


def get_health_service() -> HealthService:
    """Get health service instance."""
    return _health_service


# =============================================================================
# Endpoints
# =============================================================================


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Basic health check endpoint for liveness probe",
)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    service = get_health_service()
    data = service.check_health()
    logger.debug("health_check", status=data["status"])
    return HealthResponse(**data)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={
        200: {"description": "Service is ready"},
        503: {"description": "Service is not ready"},
    },
    summary="Readiness Check",
    description="Readiness check endpoint for Kubernetes readiness probe",
)
async def readiness_check() -> JSONResponse:
    """Readiness check endpoint.

    Returns:
        200 if ready, 503 if not ready
    """
    service = get_health_service()
    data, is_ready = service.check_readiness()

    status_code = status.HTTP_200_OK if is_ready else status.HTTP_503_SERVICE_UNAVAILABLE

    logger.debug("readiness_check", status=data["status"], is_ready=is_ready)
    return JSONResponse(content=data, status_code=status_code)
