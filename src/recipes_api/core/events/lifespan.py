"""Application lifespan event handlers.

Startup opens the PostgreSQL pool, the Redis session pool and the HTTP
clients for the search service and OAuth provider. Shutdown closes them in
reverse order.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from recipes_api.cache.redis import close_redis_pools, init_redis_pools
from recipes_api.clients.oauth import OAuthClient
from recipes_api.clients.search import SearchClient
from recipes_api.core.config import Settings, get_settings
from recipes_api.database.connection import close_database_pool, init_database_pool
from recipes_api.observability.errors import setup_error_tracking
from recipes_api.observability.logging import get_logger, setup_logging
from recipes_api.observability.tracing import shutdown_tracing
from recipes_api.workers.jobs import close_arq_pool, get_arq_pool


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI

logger = get_logger(__name__)


async def _startup(app: FastAPI, settings: Settings) -> None:
    """Initialize all application services during startup.

    The database and the session store are required; the app refuses to
    start without them. Search, OAuth and the job queue degrade instead.
    """
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )

    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        debug=settings.app.debug,
    )

    setup_error_tracking(settings)

    await init_database_pool()
    await init_redis_pools()

    await _init_arq()
    await _init_search_client(app, settings)
    await _init_oauth_client(app, settings)

    logger.info("Application startup complete")


async def _init_arq() -> None:
    """Initialize ARQ connection pool."""
    try:
        await get_arq_pool()
    except Exception:
        logger.exception("Failed to initialize ARQ pool - background jobs unavailable")


async def _init_search_client(app: FastAPI, settings: Settings) -> None:
    """Initialize the search service client."""
    try:
        search_client = SearchClient(settings)
        await search_client.initialize()
        app.state.search_client = search_client
        logger.info("SearchClient initialized", base_url=search_client.base_url)
    except Exception:
        logger.exception("Failed to initialize SearchClient - search unavailable")
        app.state.search_client = None


async def _init_oauth_client(app: FastAPI, settings: Settings) -> None:
    """Initialize the OAuth provider client when OAuth login is enabled."""
    app.state.oauth_client = None
    if not settings.oauth.enabled:
        logger.debug("OAuth login disabled")
        return

    try:
        oauth_client = OAuthClient(settings)
        await oauth_client.initialize()
        app.state.oauth_client = oauth_client
        logger.info("OAuthClient initialized", provider=oauth_client.provider)
    except Exception:
        logger.exception("Failed to initialize OAuthClient - OAuth login unavailable")


async def _shutdown(app: FastAPI) -> None:
    """Shutdown all application services."""
    logger.info("Shutting down application")

    if getattr(app.state, "oauth_client", None):
        await app.state.oauth_client.shutdown()
        logger.debug("OAuthClient shutdown")

    if getattr(app.state, "search_client", None):
        await app.state.search_client.shutdown()
        logger.debug("SearchClient shutdown")

    # Flush pending spans
    shutdown_tracing()

    await close_arq_pool()
    await close_redis_pools()
    await close_database_pool()

    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Settings stored on ``app.state`` by the factory take precedence over the
    cached global settings.

    Yields:
        None - control returns to the application to handle requests.
    """
    settings = getattr(app.state, "settings", None) or get_settings()
    await _startup(app, settings)
    yield
    await _shutdown(app)
