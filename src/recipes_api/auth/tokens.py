"""Signed email confirmation tokens (JWT via python-jose)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import UUID

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from recipes_api.core.config import get_settings
from recipes_api.observability.logging import get_logger


logger = get_logger(__name__)

CONFIRMATION_TOKEN_TYPE = "confirm"


class TokenError(Exception):
    """Base exception for token-related errors."""


class TokenExpiredError(TokenError):
    pass


class TokenInvalidError(TokenError):
    pass


def create_confirmation_token(
    user_id: UUID,
    *,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a token proving the holder received mail for ``user_id``."""
    settings = get_settings()

    if expires_delta is None:
        expires_delta = timedelta(hours=settings.tokens.confirmation_expire_hours)

    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "type": CONFIRMATION_TOKEN_TYPE,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(
        payload,
        settings.TOKEN_SECRET_KEY,
        algorithm=settings.tokens.algorithm,
    )


def decode_confirmation_token(token: str) -> UUID:
    """Return the user id a confirmation token was issued for.

    Raises:
        TokenExpiredError: If the token has expired.
        TokenInvalidError: If the token is malformed, tampered with, or of
            another type.
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.TOKEN_SECRET_KEY,
            algorithms=[settings.tokens.algorithm],
        )
    except ExpiredSignatureError as e:
        msg = "Token has expired"
        raise TokenExpiredError(msg) from e
    except JWTError as e:
        logger.warning("Invalid confirmation token", error=str(e))
        msg = "Invalid token"
        raise TokenInvalidError(msg) from e

    if payload.get("type") != CONFIRMATION_TOKEN_TYPE:
        msg = f"Invalid token type: {payload.get('type')}"
        raise TokenInvalidError(msg)

    try:
        return UUID(payload["sub"])
    except (KeyError, ValueError) as e:
        msg = "Invalid token subject"
        raise TokenInvalidError(msg) from e
