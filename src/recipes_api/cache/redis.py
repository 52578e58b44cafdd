"""Redis client and connection pool management.

The web process talks to Redis directly only for sessions; rate-limit
counters go through slowapi's storage and the job queue through arq's pool,
each on its own logical database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from recipes_api.core.config import get_settings
from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)

_session_pool: ConnectionPool[Any] | None = None
_session_client: Redis[Any] | None = None


async def init_redis_pools() -> None:
    """Create the session pool and verify it with a ping."""
    global _session_pool, _session_client  # noqa: PLW0603

    settings = get_settings()

    logger.info(
        "Initializing Redis connections",
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.session_db,
    )

    _session_pool = ConnectionPool.from_url(
        settings.redis_session_url,
        max_connections=20,
        decode_responses=True,
    )
    _session_client = redis.Redis(connection_pool=_session_pool)

    try:
        await _session_client.ping()
        logger.info("Redis connections established")
    except redis.ConnectionError:
        logger.exception("Failed to connect to Redis")
        raise


async def close_redis_pools() -> None:
    global _session_pool, _session_client  # noqa: PLW0603

    if _session_client is not None:
        await _session_client.aclose()
        _session_client = None

    if _session_pool is not None:
        await _session_pool.disconnect()
        _session_pool = None

    logger.info("Redis connections closed")


def get_session_client() -> Redis[Any]:
    """Get the Redis client backing the session store.

    Raises:
        RuntimeError: If Redis is not initialized.
    """
    if _session_client is None:
        msg = "Redis session client not initialized. Call init_redis_pools() first."
        raise RuntimeError(msg)
    return _session_client


async def check_redis_health() -> bool:
    """Return True when the session database answers a ping."""
    if _session_client is None:
        return False
    try:
        await _session_client.ping()
    except (redis.ConnectionError, redis.TimeoutError):
        logger.warning("Redis health check failed")
        return False
    return True
