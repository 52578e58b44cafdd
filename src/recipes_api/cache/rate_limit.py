"""Rate limiting with SlowAPI, counters kept in Redis.

Logged-in users are limited per account, everyone else per client address.
Auth endpoints always key on the address, so credential stuffing against
many accounts from one host still trips the limit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from recipes_api.core.config import get_settings
from recipes_api.core.exceptions import rate_limit_exceeded_handler
from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from fastapi import FastAPI
    from starlette.requests import Request

logger = get_logger(__name__)


def _get_rate_limit_key(request: Request) -> str:
    session = getattr(request.state, "session", None)
    user_id = session.get("user_id") if session is not None else None
    if user_id:
        return f"user:{user_id}"
    return str(get_remote_address(request))


def _get_auth_rate_limit_key(request: Request) -> str:
    return f"auth:{get_remote_address(request)}"


def create_limiter() -> Limiter:
    """Build the limiter from settings.

    Counters live in memory when rate limiting is disabled so that no Redis
    connection is attempted.
    """
    settings = get_settings()
    enabled = settings.rate_limiting.enabled

    return Limiter(
        key_func=_get_rate_limit_key,
        default_limits=[settings.rate_limiting.default],
        storage_uri=settings.redis_rate_limit_url if enabled else "memory://",
        strategy="fixed-window",
        headers_enabled=True,
        enabled=enabled,
    )


limiter = create_limiter()


def setup_rate_limiting(app: FastAPI) -> None:
    """Attach the limiter to the app and render 429s in the error envelope."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    logger.info("Rate limiting configured", enabled=limiter.enabled)


def rate_limit_auth() -> Any:
    """Stricter, address-keyed limit for login and registration.

    Example:
        @router.post("/login")
        @rate_limit_auth()
        async def login(request: Request, response: Response): ...
    """
    settings = get_settings()
    return limiter.limit(settings.rate_limiting.auth, key_func=_get_auth_rate_limit_key)
