"""
Email Delivery Channel
Transactional email through the Resend REST API.
"""
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from portfolio_api.core.config import Settings
from portfolio_api.delivery.models import DeliveryStatus, EmailContent

# Only transport-level failures are worth another attempt
RETRYABLE_ERRORS = (httpx.TimeoutException, httpx.NetworkError)


class ResendChannel:
    """
    Resend email delivery channel.

    Features:
    - One HTTPS POST per email, bearer authenticated
    - Bounded request timeout
    - Optional retry of transport failures (off unless max_attempts > 1)
    - Failures reported on the returned DeliveryStatus, never raised
    """

    def __init__(
        self,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
        retry_wait: Optional[wait_base] = None,
    ):
        self.api_key = settings.resend_api_key
        self.api_url = settings.resend_api_url
        self.timeout = settings.email_timeout_seconds
        self.max_attempts = max(1, settings.email_max_attempts)
        self.retry_wait = retry_wait or wait_exponential(multiplier=0.5, min=0.5, max=4)
        self._http_client = http_client
        self.logger = structlog.get_logger().bind(channel="resend")

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-loaded HTTP client for the Resend API."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"User-Agent": "portfolio-contact-api/1.0"},
            )
        return self._http_client

    def is_configured(self) -> bool:
        """Check if the Resend API key is configured."""
        return bool(self.api_key)

    def _build_payload(self, content: EmailContent) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "from": f"{content.from_name} <{content.from_email}>",
            "to": [content.to_email],
            "subject": content.subject,
            "html": content.body_html,
            "text": content.body_text,
        }
        if content.reply_to:
            payload["reply_to"] = content.reply_to
        return payload

    async def _post(self, payload: dict[str, Any], status: DeliveryStatus) -> httpx.Response:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.retry_wait,
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            reraise=True,
            before_sleep=lambda retry_state: self.logger.warning(
                "email_send_retrying",
                attempt=retry_state.attempt_number,
                error=str(retry_state.outcome.exception()),
            ),
        )

        async def post_once() -> httpx.Response:
            status.attempts += 1
            return await self.http_client.post(
                self.api_url,
                json=payload,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
            )

        return await retrying(post_once)

    def _fail(self, status: DeliveryStatus, error: str, **log_context: Any) -> DeliveryStatus:
        status.status = "failed"
        status.error_message = error
        self.logger.error("email_send_failed", error=error, attempts=status.attempts, **log_context)
        return status

    async def send(self, content: EmailContent) -> DeliveryStatus:
        """
        Send email via Resend.

        Args:
            content: Email content to send

        Returns:
            DeliveryStatus; status is "sent" or "failed"
        """
        status = DeliveryStatus()

        if not self.is_configured():
            return self._fail(status, "Resend API key not configured")

        payload = self._build_payload(content)

        try:
            response = await self._post(payload, status)
        except httpx.TimeoutException as e:
            return self._fail(status, f"Resend request timed out: {e}", error_type=type(e).__name__)
        except httpx.HTTPError as e:
            return self._fail(status, f"Resend request error: {e}", error_type=type(e).__name__)

        if not response.is_success:
            return self._fail(
                status,
                f"Resend API error (HTTP {response.status_code}): {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            data = None
        message_id = data.get("id") if isinstance(data, dict) else None

        status.status = "sent"
        status.sent_at = datetime.now(timezone.utc)
        status.provider_message_id = message_id

        self.logger.info(
            "email_sent",
            message_id=message_id,
            status_code=response.status_code,
            attempts=status.attempts,
        )
        return status

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
