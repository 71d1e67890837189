"""
Portfolio Contact API
Main entry point for the contact form backend.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from portfolio_api.api import contact, health
from portfolio_api.api.deps import close_contact_service
from portfolio_api.core.config import Settings, settings
from portfolio_api.core.cors import RoutePreflightCORSMiddleware
from portfolio_api.core.exceptions import ContactAPIError, contact_api_exception_handler
from portfolio_api.core.logging import configure_logging
from portfolio_api.core.sentry import capture_exception, init_sentry

# =============================================================================
# Logging Configuration
# =============================================================================

configure_logging(settings)
logger = structlog.get_logger(__name__)


# =============================================================================
# Lifespan Events
# =============================================================================


def validate_settings(settings: Settings) -> list[str]:
    """
    Check configuration at startup.

    Returns the list of warnings logged. Raises RuntimeError if the
    configuration is unsafe for production.
    """
    warnings = []
    errors = []

    if not settings.resend_api_key:
        warnings.append("RESEND_API_KEY is not set - contact submissions will fail with 500")

    if not settings.site_url:
        warnings.append("SITE_URL is not set - the contact endpoint will allow any origin")

    if settings.is_production and settings.debug:
        errors.append("DEBUG mode must be disabled in production (set DEBUG=false)")

    for warning in warnings:
        logger.warning("config_warning", detail=warning)

    if errors:
        for error in errors:
            logger.error("config_error", detail=error)
        raise RuntimeError(f"Cannot start in production with insecure configuration: {'; '.join(errors)}")

    return warnings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate configuration and wire error tracking; release clients on shutdown."""
    logger.info(
        "app_starting",
        app=settings.app_name,
        environment=settings.environment,
        version=settings.app_version,
    )

    validate_settings(settings)
    init_sentry(settings)

    yield

    logger.info("app_shutting_down")
    await close_contact_service()


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Contact form backend for the portfolio site.",
    version=settings.app_version,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

app.add_middleware(
    RoutePreflightCORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=False,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(ContactAPIError, contact_api_exception_handler)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("unexpected_error", path=request.url.path)
    capture_exception(
        exc,
        extra={
            "request_method": request.method,
            "request_path": request.url.path,
        },
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# =============================================================================
# API Routers
# =============================================================================

app.include_router(health.router)
app.include_router(contact.router)


# For running with uvicorn directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "portfolio_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
