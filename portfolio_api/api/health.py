"""
Health Check Endpoints
Liveness probe for the hosting platform.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from portfolio_api.core.config import settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Liveness check response."""

    status: str
    timestamp: str
    version: str
    environment: str
    email_configured: bool


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Report that the process is up and whether email dispatch can work."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app_version,
        environment=settings.environment,
        email_configured=bool(settings.resend_api_key),
    )
