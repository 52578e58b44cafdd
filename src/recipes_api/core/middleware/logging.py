"""Access logging middleware."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from recipes_api.observability.logging import bind_context, get_logger


if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

logger = get_logger(__name__)

DEFAULT_EXCLUDED_PATHS = frozenset({"/health", "/ready", "/metrics", "/favicon.ico"})

# Seconds
SLOW_REQUEST_THRESHOLD = 1.0


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line when a request starts and one when it completes.

    Method, path and client address are bound to the log context so that
    every record emitted while handling the request carries them. The
    completion line carries the handler duration, which is also returned
    to the caller in ``X-Process-Time``. Requests slower than
    ``slow_threshold`` complete at warning level.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        exclude_paths: set[str] | frozenset[str] | None = None,
        slow_threshold: float = SLOW_REQUEST_THRESHOLD,
    ) -> None:
        super().__init__(app)
        self.exclude_paths = exclude_paths or DEFAULT_EXCLUDED_PATHS
        self.slow_threshold = slow_threshold

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path in self.exclude_paths:
            return await call_next(request)

        bind_context(
            method=request.method,
            path=request.url.path,
            client_ip=client_ip(request),
        )
        logger.info(
            "Request started",
            query=str(request.query_params) if request.query_params else None,
        )

        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started
        elapsed_ms = round(elapsed * 1000, 2)
        response.headers["X-Process-Time"] = f"{elapsed_ms}ms"

        slow = elapsed > self.slow_threshold
        log = logger.warning if slow or response.status_code >= 500 else logger.info
        log(
            "Request completed",
            status_code=response.status_code,
            elapsed_ms=elapsed_ms,
            slow=slow,
        )
        return response


def client_ip(request: Request) -> str:
    """Best guess at the caller's address behind a reverse proxy."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host
    return "unknown"
