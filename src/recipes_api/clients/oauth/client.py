"""OAuth2 authorization-code client for the external identity provider."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import orjson
from pydantic import ValidationError

from recipes_api.clients.oauth.exceptions import (
    OAuthExchangeError,
    OAuthIdentityError,
    OAuthUnavailableError,
)
from recipes_api.clients.oauth.schemas import OAuthIdentity, TokenResponse, UserInfo
from recipes_api.core.config import get_settings
from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from recipes_api.core.config import Settings

logger = get_logger(__name__)


class OAuthClient:
    """Drives the three provider calls of the authorization-code flow.

    1. ``authorization_url`` - where to send the browser
    2. ``exchange_code`` - trade the callback code for an access token
    3. ``fetch_identity`` - read the user's id, email and name
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._http_client: httpx.AsyncClient | None = None

    @property
    def provider(self) -> str:
        return self._settings.oauth.provider

    async def initialize(self) -> None:
        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._settings.oauth.timeout),
            headers={"Accept": "application/json"},
        )
        logger.info("OAuthClient initialized", provider=self.provider)

    async def shutdown(self) -> None:
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
        logger.debug("OAuthClient shutdown")

    def authorization_url(self, state: str) -> str:
        oauth = self._settings.oauth
        params = {
            "response_type": "code",
            "client_id": oauth.client_id or "",
            "redirect_uri": oauth.redirect_url,
            "scope": " ".join(oauth.scopes),
            "state": state,
        }
        return str(httpx.URL(oauth.authorize_url, params=params))

    async def exchange_code(self, code: str) -> str:
        """Return the access token for an authorization code.

        Raises:
            OAuthUnavailableError: If the provider is unreachable.
            OAuthExchangeError: If the provider rejects the code.
        """
        oauth = self._settings.oauth
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": oauth.redirect_url,
            "client_id": oauth.client_id or "",
            "client_secret": self._settings.OAUTH_CLIENT_SECRET or "",
        }
        response = await self._send("POST", oauth.token_url, data=data)
        try:
            token = TokenResponse.model_validate(orjson.loads(response.content))
        except (orjson.JSONDecodeError, ValidationError) as e:
            msg = "Malformed token response"
            raise OAuthExchangeError(msg) from e
        return token.access_token

    async def fetch_identity(self, access_token: str) -> OAuthIdentity:
        """Read the provider's user info for an access token.

        Raises:
            OAuthIdentityError: If the account has no (verified) email.
        """
        response = await self._send(
            "GET",
            self._settings.oauth.userinfo_url,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        try:
            info = UserInfo.model_validate(orjson.loads(response.content))
        except (orjson.JSONDecodeError, ValidationError) as e:
            msg = "Malformed user info response"
            raise OAuthExchangeError(msg) from e

        if not info.email or info.verified is False:
            msg = "The identity provider did not return a verified email"
            raise OAuthIdentityError(msg)

        return OAuthIdentity(
            provider=self.provider,
            subject=info.id,
            email=info.email.lower(),
            name=info.global_name or info.name or info.username or info.email,
        )

    async def _send(
        self,
        method: str,
        url: str,
        *,
        data: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        if not self._http_client:
            msg = "Client not initialized. Call initialize() first."
            raise RuntimeError(msg)

        try:
            response = await self._http_client.request(
                method, url, data=data, headers=headers
            )
        except httpx.RequestError as e:
            logger.warning("Failed to reach identity provider", error=str(e))
            msg = f"Failed to reach identity provider: {e}"
            raise OAuthUnavailableError(msg) from e

        if response.is_error:
            logger.warning(
                "Identity provider returned error",
                status_code=response.status_code,
                url=url,
            )
            msg = f"Identity provider returned {response.status_code}"
            raise OAuthExchangeError(msg, status_code=response.status_code)
        return response
