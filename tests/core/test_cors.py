"""
Tests for the route-preflight CORS middleware.
"""
import pytest
from fastapi import FastAPI, Response
from httpx import ASGITransport, AsyncClient

from portfolio_api.core.cors import RoutePreflightCORSMiddleware


@pytest.fixture
def cors_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(
        RoutePreflightCORSMiddleware,
        allow_origins=["https://me.dev"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.options("/echo")
    async def echo_options() -> Response:
        return Response(status_code=200, headers={"X-Handled-By": "route"})

    @app.post("/echo")
    async def echo_post() -> dict:
        return {"ok": True}

    return app


class TestRoutePreflightCORSMiddleware:
    """Tests for RoutePreflightCORSMiddleware."""

    @pytest.mark.asyncio
    async def test_disallowed_origin_preflight_reaches_route(self, cors_app):
        async with AsyncClient(transport=ASGITransport(app=cors_app), base_url="http://test") as ac:
            response = await ac.options(
                "/echo",
                headers={"Origin": "https://other.example", "Access-Control-Request-Method": "POST"},
            )

        assert response.status_code == 200
        assert response.headers["X-Handled-By"] == "route"

    @pytest.mark.asyncio
    async def test_post_from_allowed_origin_gets_cors_headers(self, cors_app):
        async with AsyncClient(transport=ASGITransport(app=cors_app), base_url="http://test") as ac:
            response = await ac.post("/echo", headers={"Origin": "https://me.dev"})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "https://me.dev"

    @pytest.mark.asyncio
    async def test_post_from_other_origin_has_no_cors_headers(self, cors_app):
        async with AsyncClient(transport=ASGITransport(app=cors_app), base_url="http://test") as ac:
            response = await ac.post("/echo", headers={"Origin": "https://other.example"})

        assert "access-control-allow-origin" not in response.headers
