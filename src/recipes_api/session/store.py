"""Redis-backed session store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from redis.exceptions import RedisError

from recipes_api.cache.redis import get_session_client
from recipes_api.observability.logging import get_logger
from recipes_api.session.exceptions import SessionStoreError
from recipes_api.session.session import Session, session_id_from_cookie_value


if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)


class RedisSessionStore:
    """Persist sessions as JSON under ``{prefix}{session id}``.

    Records expire in Redis together with the session, so no cleanup job
    is needed.
    """

    def __init__(self, client: Redis[Any] | None = None, *, prefix: str = "session:") -> None:
        self._client = client
        self.prefix = prefix

    @property
    def client(self) -> Redis[Any]:
        if self._client is not None:
            return self._client
        return get_session_client()

    def _key(self, session_id: str) -> str:
        return f"{self.prefix}{session_id}"

    async def load_session(self, cookie_value: str) -> Session | None:
        """Find the live session a verified cookie value refers to."""
        session_id = session_id_from_cookie_value(cookie_value)
        try:
            raw = await self.client.get(self._key(session_id))
        except RedisError as e:
            raise SessionStoreError(str(e)) from e

        if raw is None:
            return None

        try:
            session = Session.from_json(raw)
        except (ValueError, KeyError) as e:
            logger.warning("Discarding unreadable session record", error=str(e))
            return None
        return session.validate()

    async def store_session(self, session: Session) -> str | None:
        """Write the session and return its cookie value if it has a new one."""
        ttl = session.expires_in
        if ttl == 0:
            logger.debug("Not storing expired session")
            return None

        try:
            await self.client.set(self._key(session.id), session.to_json(), ex=ttl)
        except RedisError as e:
            raise SessionStoreError(str(e)) from e
        return session.take_cookie_value()

    async def destroy_session(self, session: Session) -> None:
        try:
            await self.client.delete(self._key(session.id))
        except RedisError as e:
            raise SessionStoreError(str(e)) from e

    async def clear_store(self) -> int:
        """Delete every session. Returns how many were removed."""
        removed = 0
        try:
            async for key in self.client.scan_iter(match=f"{self.prefix}*"):
                removed += await self.client.delete(key)
        except RedisError as e:
            raise SessionStoreError(str(e)) from e
        logger.info("Session store cleared", removed=removed)
        return removed
