"""
Contact API Test Configuration and Fixtures
Shared pytest fixtures for all test modules.
"""
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from portfolio_api.api.deps import get_contact_service
from portfolio_api.core.config import Settings
from portfolio_api.core.rate_limit import InMemoryRateLimiter
from portfolio_api.delivery.channels import ResendChannel
from portfolio_api.delivery.models import DeliveryStatus
from portfolio_api.main import app
from portfolio_api.services.contact import ContactService


class FakeClock:
    """Monotonic clock the tests can move forward by hand."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        environment="test",
        site_url="https://portfolio.example.com",
        cors_origins="",
        resend_api_key="re_test_key",
        resend_api_url="https://api.resend.test/emails",
        contact_email="owner@example.com",
        from_email="contact@portfolio.example.com",
        from_name="Portfolio Contact",
        email_timeout_seconds=10.0,
        email_max_attempts=1,
        rate_limit_enabled=True,
        rate_limit_backend="memory",
        rate_limit_contact_requests=5,
        rate_limit_contact_window=900,
        sentry_dsn=None,
    )


# =============================================================================
# Pipeline Fixtures
# =============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_limiter(test_settings, clock) -> InMemoryRateLimiter:
    """Fresh limiter per test - no state shared between tests."""
    return InMemoryRateLimiter(
        limit=test_settings.rate_limit_contact_requests,
        window=test_settings.rate_limit_contact_window,
        clock=clock,
    )


@pytest.fixture
def mock_channel():
    """Dispatch spy that reports every email as sent."""
    channel = MagicMock(spec=ResendChannel)
    channel.send = AsyncMock(
        return_value=DeliveryStatus(status="sent", provider_message_id="msg_123", attempts=1)
    )
    channel.close = AsyncMock()
    return channel


@pytest.fixture
def contact_service(test_settings, rate_limiter, mock_channel) -> ContactService:
    return ContactService(
        settings=test_settings,
        rate_limiter=rate_limiter,
        channel=mock_channel,
    )


@pytest.fixture
def valid_payload() -> dict:
    return {
        "name": "John Doe",
        "email": "john@example.com",
        "message": "This is a test message that is long enough.",
    }


# =============================================================================
# HTTP Client Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def client(contact_service) -> AsyncGenerator[AsyncClient, None]:
    """Async client against the app with the contact service overridden."""
    app.dependency_overrides[get_contact_service] = lambda: contact_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# =============================================================================
# Redis Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_redis():
    """Mock Redis client for testing."""
    redis_mock = MagicMock()
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[True, 1])
    redis_mock.pipeline = MagicMock(return_value=pipe)
    redis_mock.ttl = AsyncMock(return_value=900)
    redis_mock.ping = AsyncMock(return_value=True)
    redis_mock.aclose = AsyncMock()
    return redis_mock
