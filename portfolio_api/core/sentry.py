"""
Sentry Error Tracking Configuration
"""

import logging
from typing import Any

import sentry_sdk
import structlog
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from portfolio_api.core.config import Settings

logger = structlog.get_logger(__name__)

# Submitter data must never leave the process through error reports
SENSITIVE_BODY_FIELDS = ("name", "email", "message", "website")


def before_send(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """
    Process events before sending to Sentry.

    Drops health check noise and strips form data.
    """
    request = event.get("request")
    if not request:
        return event

    if request.get("url", "").endswith("/health"):
        return None

    if "headers" in request:
        for header in ("authorization", "cookie", "x-forwarded-for", "x-real-ip"):
            if header in request["headers"]:
                request["headers"][header] = "[REDACTED]"

    data = request.get("data")
    if isinstance(data, dict):
        for field in SENSITIVE_BODY_FIELDS:
            if field in data:
                data[field] = "[REDACTED]"
    elif data:
        request["data"] = "[REDACTED]"

    return event


def init_sentry(settings: Settings) -> bool:
    """
    Initialize Sentry SDK with FastAPI integration.

    Returns:
        bool: True if Sentry was initialized successfully, False otherwise.
    """
    if not settings.sentry_dsn:
        logger.info("sentry_disabled", reason="no_dsn")
        return False

    try:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.sentry_environment or settings.environment,
            release=f"portfolio-contact-api@{settings.app_version}",
            traces_sample_rate=settings.sentry_traces_sample_rate,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                StarletteIntegration(transaction_style="endpoint"),
                LoggingIntegration(
                    level=logging.INFO,
                    event_level=logging.ERROR,
                ),
            ],
            before_send=before_send,
            send_default_pii=False,
            attach_stacktrace=True,
            max_breadcrumbs=50,
        )
        sentry_sdk.set_tag("service", "contact-api")

        logger.info(
            "sentry_initialized",
            environment=settings.sentry_environment or settings.environment,
            traces_sample_rate=settings.sentry_traces_sample_rate,
        )
        return True

    except Exception as e:
        logger.error("sentry_init_failed", error=str(e))
        return False


def capture_exception(
    error: Exception,
    extra: dict[str, Any] | None = None,
) -> str | None:
    """
    Capture an exception and send to Sentry.

    Returns:
        Event ID if captured, None otherwise
    """
    with sentry_sdk.new_scope() as scope:
        if extra:
            for key, value in extra.items():
                scope.set_extra(key, value)

        return sentry_sdk.capture_exception(error)
