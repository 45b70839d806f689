# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from app.dependencies import ObjectStoreDep, RecordStoreDep
from core.models.content import Collection

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Liveness response. No dependencies are touched."""
    status: str


class ChecksResponse(BaseModel):
    """Individual service checks."""
    database: str
    storage: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Trivial liveness probe."""
    return HealthResponse(status="ok")


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(record_store: RecordStoreDep, object_store: ObjectStoreDep):
    """
    Readiness check endpoint.

    Reads one collection and makes sure the image bucket exists.
    """
    checks = ChecksResponse(database="unknown", storage="unknown")

    try:
        await run_in_threadpool(record_store.get, Collection.PROJECTS.value)
        checks.database = "healthy"
    except Exception as e:
        checks.database = f"unhealthy: {str(e)[:50]}"

    try:
        await run_in_threadpool(object_store.ensure_bucket)
        checks.storage = "healthy"
    except Exception as e:
        checks.storage = f"unhealthy: {str(e)[:50]}"

    all_healthy = checks.database == "healthy" and checks.storage == "healthy"

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
