"""Cookie session middleware.

Every request gets a ``Session`` on ``request.state.session``: the one named
by a correctly signed cookie if it is still live in the store, otherwise a
fresh one. After the handler runs the session is persisted and the cookie
written according to these rules:

* destroyed sessions are deleted and the browser receives a removal cookie;
* otherwise, when ``save_unchanged`` is set, the data changed, or the
  request carried no valid cookie, the session is stored (rotating its
  cookie value first if regeneration was requested) and a new cookie is
  sent if the session has a new cookie value.

A store failure turns the response into a 500.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from fastapi import status
from fastapi.responses import ORJSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from recipes_api.core.exceptions import ErrorResponse
from recipes_api.observability.logging import bind_context, get_logger
from recipes_api.session.exceptions import SessionStoreError
from recipes_api.session.session import Session
from recipes_api.session.signing import CookieSigner
from recipes_api.session.store import RedisSessionStore


if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

    from recipes_api.core.config.settings import SessionSettings

logger = get_logger(__name__)


class SessionMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        *,
        settings: SessionSettings,
        signing_key: bytes,
        store: RedisSessionStore | None = None,
        exclude_paths: set[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.exclude_paths = exclude_paths or set()
        self.settings = settings
        self.signer = CookieSigner(signing_key)
        self.store = store or RedisSessionStore(prefix=settings.key_prefix)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path in self.exclude_paths:
            return await call_next(request)

        cookie_value = self._read_cookie(request)
        secure = (
            self.settings.secure
            if self.settings.secure is not None
            else request.url.scheme == "https"
        )

        try:
            session = await self._load_or_create(cookie_value)
        except SessionStoreError:
            logger.exception("Failed to load session")
            return self._error_response(request)

        if self.settings.ttl_seconds is not None:
            session.expire_in(self.settings.ttl_seconds)

        request.state.session = session
        if session.get("user_id"):
            bind_context(user_id=session.get("user_id"))

        response = await call_next(request)

        if session.destroyed:
            try:
                await self.store.destroy_session(session)
            except SessionStoreError:
                logger.exception("Failed to destroy session")
                response = self._error_response(request)
            self._set_removal_cookie(response, secure=secure)
            return response

        if self.settings.save_unchanged or session.data_changed or cookie_value is None:
            if session.should_regenerate:
                try:
                    await self.store.destroy_session(session)
                except SessionStoreError:
                    logger.exception("Failed to destroy old session on regenerate")
                session.rotate()

            try:
                new_cookie_value = await self.store.store_session(session)
            except SessionStoreError:
                logger.exception("Failed to reach session storage")
                return self._error_response(request)

            if new_cookie_value is not None:
                self._set_cookie(response, new_cookie_value, secure=secure)

        return response

    def _read_cookie(self, request: Request) -> str | None:
        """Return the verified cookie value, or None if absent or tampered with."""
        raw = request.cookies.get(self.settings.cookie_name)
        if not raw:
            return None
        value = self.signer.verify(raw)
        if value is None:
            logger.debug("Ignoring session cookie with a bad signature")
        return value

    async def _load_or_create(self, cookie_value: str | None) -> Session:
        if cookie_value is not None:
            session = await self.store.load_session(cookie_value)
            if session is not None:
                return session
        return Session()

    def _set_cookie(self, response: Response, cookie_value: str, *, secure: bool) -> None:
        expires = None
        if self.settings.ttl_seconds is not None:
            expires = datetime.now(UTC) + timedelta(seconds=self.settings.ttl_seconds)

        response.set_cookie(
            self.settings.cookie_name,
            self.signer.sign(cookie_value),
            expires=expires,
            path=self.settings.cookie_path,
            domain=self.settings.cookie_domain,
            secure=secure,
            httponly=True,
            samesite=self.settings.same_site,
        )

    def _set_removal_cookie(self, response: Response, *, secure: bool) -> None:
        response.set_cookie(
            self.settings.cookie_name,
            self.signer.sign(""),
            max_age=0,
            expires=0,
            path=self.settings.cookie_path,
            domain=self.settings.cookie_domain,
            secure=secure,
            httponly=True,
            samesite=self.settings.same_site,
        )

    def _error_response(self, request: Request) -> ORJSONResponse:
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error="INTERNAL_SERVER_ERROR",
                message="Session storage unavailable",
                request_id=getattr(request.state, "request_id", None),
            ).model_dump(),
        )
