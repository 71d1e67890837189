"""
Contact submission pipeline.

Runs each request through rate limit -> parse/validate -> spam checks ->
dispatch, in that order and exactly once. Rejections are raised as
ContactAPIError subclasses; spam is swallowed and reported to the caller
as an ordinary success.
"""
import json
from enum import Enum
from typing import Optional

import structlog

from portfolio_api.core.config import Settings
from portfolio_api.core.exceptions import (
    ContactValidationError,
    DispatchError,
    RateLimitExceeded,
)
from portfolio_api.core.rate_limit import BaseRateLimiter, create_rate_limiter
from portfolio_api.delivery.channels import ResendChannel
from portfolio_api.delivery.models import DeliveryStatus
from portfolio_api.delivery.templates import build_contact_email
from portfolio_api.schemas.contact import ContactSubmission, validate_submission
from portfolio_api.services.spam_filter import SpamFilter

logger = structlog.get_logger(__name__)

# Sent and spam outcomes must be indistinguishable to the client
SUCCESS_MESSAGE = "Message sent successfully! I'll get back to you soon."


class SubmissionOutcome(str, Enum):
    """Terminal success states of the pipeline."""

    SENT = "sent"
    SPAM = "spam"


class ContactService:
    """Owns the collaborators of the contact pipeline for one process."""

    def __init__(
        self,
        settings: Settings,
        rate_limiter: Optional[BaseRateLimiter],
        channel: ResendChannel,
        spam_filter: Optional[SpamFilter] = None,
    ):
        self.settings = settings
        # None disables rate limiting
        self.rate_limiter = rate_limiter
        self.channel = channel
        self.spam_filter = spam_filter or SpamFilter()

    async def check_rate_limit(self, client_key: str) -> None:
        if self.rate_limiter is None:
            return

        if await self.rate_limiter.allow(client_key):
            return

        retry_after = await self.rate_limiter.retry_after(client_key)
        logger.warning("contact_rate_limited", client=client_key, retry_after=retry_after)
        raise RateLimitExceeded(retry_after=retry_after)

    def parse(self, raw_body: bytes) -> ContactSubmission:
        """Decode and validate a raw JSON request body."""
        try:
            payload = json.loads(raw_body)
        except ValueError:
            raise ContactValidationError([{"field": "body", "message": "Malformed JSON body"}])
        return validate_submission(payload)

    async def dispatch(self, submission: ContactSubmission) -> DeliveryStatus:
        content = build_contact_email(submission, self.settings)
        status = await self.channel.send(content)
        if not status.succeeded:
            raise DispatchError(status.error_message or "unknown dispatch failure")
        return status

    async def handle(self, client_key: str, raw_body: bytes) -> SubmissionOutcome:
        """
        Process one contact request end to end.

        Raises:
            RateLimitExceeded: client is over its window quota; nothing else ran
            ContactValidationError: body is malformed or fails validation
            DispatchError: the notification email could not be delivered
        """
        await self.check_rate_limit(client_key)

        try:
            submission = self.parse(raw_body)
        except ContactValidationError as e:
            logger.info("contact_invalid", client=client_key, fields=e.fields)
            raise

        reason = self.spam_filter.classify(submission)
        if reason is not None:
            logger.info("contact_spam_detected", client=client_key, reason=reason.value)
            return SubmissionOutcome.SPAM

        try:
            status = await self.dispatch(submission)
        except DispatchError as e:
            logger.error("contact_dispatch_failed", client=client_key, reason=e.reason)
            raise

        logger.info(
            "contact_sent",
            client=client_key,
            delivery_id=str(status.delivery_id),
            provider_message_id=status.provider_message_id,
        )
        return SubmissionOutcome.SENT

    async def close(self) -> None:
        if self.rate_limiter is not None:
            await self.rate_limiter.close()
        await self.channel.close()


def create_contact_service(settings: Settings) -> ContactService:
    """Wire the service from settings."""
    return ContactService(
        settings=settings,
        rate_limiter=create_rate_limiter(settings),
        channel=ResendChannel(settings),
    )
