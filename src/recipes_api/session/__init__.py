"""Signed-cookie sessions stored in Redis."""

from recipes_api.session.exceptions import SessionStoreError
from recipes_api.session.middleware import SessionMiddleware
from recipes_api.session.session import Session, session_id_from_cookie_value
from recipes_api.session.signing import BASE64_DIGEST_LEN, CookieSigner
from recipes_api.session.store import RedisSessionStore


__all__ = [
    "BASE64_DIGEST_LEN",
    "CookieSigner",
    "RedisSessionStore",
    "Session",
    "SessionMiddleware",
    "SessionStoreError",
    "session_id_from_cookie_value",
]
