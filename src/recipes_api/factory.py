"""Application factory for creating FastAPI instances.

This module provides the create_app factory function that:
- Configures the FastAPI application with appropriate settings
- Sets up the middleware stack, sessions included, in the correct order
- Registers exception handlers and rate limiting
- Mounts API routers
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.middleware import SlowAPIMiddleware

from recipes_api.api.v1.router import router as v1_router
from recipes_api.cache.rate_limit import setup_rate_limiting
from recipes_api.core.config import Settings, get_settings
from recipes_api.core.events import lifespan
from recipes_api.core.exceptions import setup_exception_handlers
from recipes_api.core.middleware import (
    LoggingMiddleware,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
)
from recipes_api.observability.metrics import setup_metrics
from recipes_api.observability.tracing import setup_tracing
from recipes_api.session import RedisSessionStore, SessionMiddleware


def create_app(
    settings: Settings | None = None,
    *,
    session_store: RedisSessionStore | None = None,
) -> FastAPI:
    """Create and configure a FastAPI application instance.

    Args:
        settings: Optional settings override. If not provided, uses get_settings().
        session_store: Optional session store, mainly for tests. Defaults to
            the shared Redis session client.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        description="Recipe sharing API: users, recipes, ingredients and search",
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        debug=settings.app.debug,
    )

    # Store settings in app state for access in routes and the lifespan
    app.state.settings = settings
    app.state.search_client = None
    app.state.oauth_client = None

    setup_exception_handlers(app)
    setup_rate_limiting(app)

    # Setup middleware (order matters - first added = last executed)
    _setup_middleware(app, settings, session_store)

    app.include_router(v1_router, prefix=settings.api.prefix)

    # Setup observability (after routes are mounted)
    setup_tracing(app, settings)
    setup_metrics(app, settings)

    return app


def _setup_middleware(
    app: FastAPI,
    settings: Settings,
    session_store: RedisSessionStore | None,
) -> None:
    """Configure middleware stack.

    Order from request perspective:
    1. RequestIDMiddleware (assigns request ID, resets log context)
    2. SecurityHeadersMiddleware (adds security headers)
    3. LoggingMiddleware (logs and times requests/responses)
    4. SessionMiddleware (loads and persists the cookie session)
    5. SlowAPIMiddleware (default limits, keyed on the session user)
    6. CORSMiddleware (handles CORS)
    """
    prefix = settings.api.prefix

    # CORS - must be added first (runs last on request, first on response)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.api.cors_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Process-Time"],
        )

    # Runs inside SessionMiddleware so request.state.session is set for the key
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        SessionMiddleware,
        settings=settings.session,
        signing_key=settings.session_signing_key,
        store=session_store,
        exclude_paths={f"{prefix}/health", f"{prefix}/ready", f"{prefix}/metrics"},
    )

    # Request/response logging and timing
    app.add_middleware(LoggingMiddleware)

    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.is_production)

    # Request ID and log context (runs first on request)
    app.add_middleware(RequestIDMiddleware)
