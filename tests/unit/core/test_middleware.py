"""Unit tests for the HTTP middleware."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from unittest.mock import patch

import httpx
import pytest
from fastapi import FastAPI, Request

from recipes_api.core.middleware import (
    LoggingMiddleware,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
)
from recipes_api.core.middleware.logging import client_ip
from recipes_api.observability.logging import get_context


pytestmark = pytest.mark.unit


def _build_app(*, hsts: bool = False, slow_threshold: float = 1.0) -> FastAPI:
    app = FastAPI()
    app.add_middleware(LoggingMiddleware, slow_threshold=slow_threshold)
    app.add_middleware(SecurityHeadersMiddleware, hsts=hsts)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/echo")
    async def echo(request: Request) -> dict[str, str | None]:
        return {
            "request_id": request.state.request_id,
            "context_id": get_context().get("request_id"),
            "client_ip": client_ip(request),
        }

    return app


@pytest.fixture
async def client() -> AsyncGenerator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=_build_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


class TestRequestIDMiddleware:
    async def test_generates_id(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/echo")

        request_id = response.headers["X-Request-ID"]
        assert len(request_id) == 36
        assert response.json()["request_id"] == request_id
        assert response.json()["context_id"] == request_id

    async def test_reuses_incoming_id(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/echo", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    async def test_replaces_oversized_id(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/echo", headers={"X-Request-ID": "x" * 200})

        assert response.headers["X-Request-ID"] != "x" * 200


class TestLoggingMiddleware:
    async def test_process_time_header(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/echo")

        assert response.headers["X-Process-Time"].endswith("ms")

    async def test_completion_logged_with_duration(self) -> None:
        transport = httpx.ASGITransport(app=_build_app())
        with patch("recipes_api.core.middleware.logging.logger") as logger:
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
                await c.get("/echo")

        logger.warning.assert_not_called()
        args, kwargs = logger.info.call_args
        assert args == ("Request completed",)
        assert kwargs["status_code"] == 200
        assert kwargs["slow"] is False
        assert kwargs["elapsed_ms"] >= 0

    async def test_slow_request_warns(self) -> None:
        """Should complete at warning level once past the slow threshold."""
        transport = httpx.ASGITransport(app=_build_app(slow_threshold=0.0))
        with patch("recipes_api.core.middleware.logging.logger") as logger:
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
                await c.get("/echo")

        args, kwargs = logger.warning.call_args
        assert args == ("Request completed",)
        assert kwargs["slow"] is True

    async def test_excluded_path_untimed(self) -> None:
        app = _build_app()

        @app.get("/health")
        async def health() -> dict[str, str]:
            return {"status": "alive"}

        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.get("/health")

        assert "X-Process-Time" not in response.headers


class TestSecurityHeadersMiddleware:
    async def test_hardening_headers(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/echo")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "default-src 'none'" in response.headers["Content-Security-Policy"]
        assert "Strict-Transport-Security" not in response.headers

    async def test_no_store_with_cookie(self, client: httpx.AsyncClient) -> None:
        """Should forbid caching of session-bearing responses."""
        response = await client.get("/echo", headers={"Cookie": "sid=abc"})

        assert response.headers["Cache-Control"] == "no-store, private"

    async def test_hsts(self) -> None:
        transport = httpx.ASGITransport(app=_build_app(hsts=True))
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.get("/echo")

        assert "max-age=31536000" in response.headers["Strict-Transport-Security"]


class TestClientIp:
    async def test_forwarded_for(self, client: httpx.AsyncClient) -> None:
        response = await client.get(
            "/echo", headers={"X-Forwarded-For": "198.51.100.1, 10.0.0.1"}
        )

        assert response.json()["client_ip"] == "198.51.100.1"

    async def test_real_ip(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/echo", headers={"X-Real-IP": "198.51.100.2"})

        assert response.json()["client_ip"] == "198.51.100.2"
