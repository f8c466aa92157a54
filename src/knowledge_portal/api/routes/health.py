"""Health check endpoints."""

from fastapi import APIRouter, status
from pydantic import BaseModel
from sqlalchemy import text

from knowledge_portal.api.deps import CatalogDep
from knowledge_portal.config import settings
from knowledge_portal.db.session import engine
from knowledge_portal.logging import get_logger

router = APIRouter(tags=["Health"])
logger = get_logger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    components: dict[str, bool] | None = None


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool
    database: bool
    catalog: bool


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Basic health check endpoint that verifies the API is running.",
)
async def health_check() -> HealthResponse:
    """Basic health check - is the API up?

    Reports which adapters are backed by a real provider rather than a stub.
    """
    from knowledge_portal import __version__

    components = {
        "catalog": settings.catalog_provider,
        "storage": settings.storage_provider,
        "notifier": settings.notifier_provider,
        "summary": settings.summary_provider,
        "auth": settings.auth_provider,
    }

    return HealthResponse(
        status="healthy",
        version=__version__,
        components={k: v != "stub" for k, v in components.items()},
    )


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Readiness check that verifies the database and catalog configuration.",
)
async def readiness_check(catalog: CatalogDep) -> ReadinessResponse:
    """Readiness check including dependencies."""
    database_ok = False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            database_ok = True
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))

    catalog_ok = await catalog.health_check()

    return ReadinessResponse(
        ready=database_ok and catalog_ok,
        database=database_ok,
        catalog=catalog_ok,
    )


@router.get(
    "/health/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    description="Simple liveness probe for Kubernetes.",
)
async def liveness_check() -> dict[str, str]:
    """Kubernetes liveness probe - is the process alive?"""
    return {"status": "alive"}
