"""
Tests for the health check endpoint.
"""
from datetime import datetime

import pytest

from portfolio_api.core.config import settings


class TestHealth:
    """Tests for GET /health."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == settings.app_version
        assert data["environment"] == settings.environment
        assert data["email_configured"] == bool(settings.resend_api_key)
        assert "timestamp" in data

    @pytest.mark.asyncio
    async def test_health_fields(self, client):
        data = (await client.get("/health")).json()

        assert set(data) == {"status", "timestamp", "version", "environment", "email_configured"}
        assert datetime.fromisoformat(data["timestamp"]).utcoffset().total_seconds() == 0
