# =============================================================================
# app/routers/health.py - Liveness and Readiness
# =============================================================================
# /health/ready pings the wines table; /health and /health/live never
# touch Supabase.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app import __version__
from app.config import settings
from lib.supabase_client import SupabaseClient

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Build and environment of the running service."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Per-dependency status strings."""
    database: str


class ReadinessResponse(BaseModel):
    """Whether the wines table is reachable."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Process heartbeat."""
    status: str
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Static status, environment and version."""
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=__version__,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """Ping the wines table; "degraded" with a truncated error when it fails."""
    checks = ChecksResponse(database="unknown")

    try:
        SupabaseClient.ping()
        checks.database = "healthy"
    except Exception as e:
        checks.database = f"unhealthy: {str(e)[:50]}"

    return ReadinessResponse(
        status="ready" if checks.database == "healthy" else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    return LivenessResponse(
        status="alive",
        timestamp=_now(),
    )
