"""Redis connections and rate limiting."""

from recipes_api.cache.rate_limit import limiter, rate_limit_auth, setup_rate_limiting
from recipes_api.cache.redis import (
    check_redis_health,
    close_redis_pools,
    get_session_client,
    init_redis_pools,
)


__all__ = [
    "check_redis_health",
    "close_redis_pools",
    "get_session_client",
    "init_redis_pools",
    "limiter",
    "rate_limit_auth",
    "setup_rate_limiting",
]
