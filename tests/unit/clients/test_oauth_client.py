"""Unit tests for OAuthClient."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from recipes_api.clients.oauth.client import OAuthClient
from recipes_api.clients.oauth.exceptions import (
    OAuthExchangeError,
    OAuthIdentityError,
    OAuthUnavailableError,
)
from recipes_api.core.config import Settings


pytestmark = pytest.mark.unit


@pytest.fixture
def mock_http_client() -> MagicMock:
    client = MagicMock(spec=httpx.AsyncClient)
    client.request = AsyncMock()
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def client(settings: Settings, mock_http_client: MagicMock) -> OAuthClient:
    oauth_settings = settings.model_copy(
        update={
            "oauth": settings.oauth.model_copy(update={"client_id": "client-1"}),
            "OAUTH_CLIENT_SECRET": "s3cret",
        }
    )
    oauth_client = OAuthClient(oauth_settings)
    oauth_client._http_client = mock_http_client
    return oauth_client


class TestAuthorizationUrl:
    def test_includes_state_and_scopes(self, client: OAuthClient) -> None:
        """Should build the provider URL for the authorization-code flow."""
        url = urlparse(client.authorization_url("xyz"))
        params = parse_qs(url.query)

        assert url.netloc == "discord.com"
        assert params["state"] == ["xyz"]
        assert params["client_id"] == ["client-1"]
        assert params["response_type"] == ["code"]
        assert params["scope"] == ["identify email"]


class TestExchangeCode:
    """Tests for OAuthClient.exchange_code."""

    async def test_returns_access_token(
        self, client: OAuthClient, mock_http_client: MagicMock
    ) -> None:
        mock_http_client.request.return_value = httpx.Response(
            200, json={"access_token": "tok", "token_type": "Bearer"}
        )

        assert await client.exchange_code("c0de") == "tok"
        data = mock_http_client.request.call_args.kwargs["data"]
        assert data["code"] == "c0de"
        assert data["client_secret"] == "s3cret"

    async def test_rejected_code(
        self, client: OAuthClient, mock_http_client: MagicMock
    ) -> None:
        mock_http_client.request.return_value = httpx.Response(
            400, json={"error": "invalid_grant"}
        )

        with pytest.raises(OAuthExchangeError) as exc_info:
            await client.exchange_code("bad")

        assert exc_info.value.status_code == 400

    async def test_malformed_response(
        self, client: OAuthClient, mock_http_client: MagicMock
    ) -> None:
        mock_http_client.request.return_value = httpx.Response(200, content=b"<html>")

        with pytest.raises(OAuthExchangeError, match="Malformed"):
            await client.exchange_code("c0de")

    async def test_unreachable(
        self, client: OAuthClient, mock_http_client: MagicMock
    ) -> None:
        mock_http_client.request.side_effect = httpx.ConnectError("refused")

        with pytest.raises(OAuthUnavailableError):
            await client.exchange_code("c0de")


class TestFetchIdentity:
    """Tests for OAuthClient.fetch_identity."""

    async def test_normalizes_identity(
        self, client: OAuthClient, mock_http_client: MagicMock
    ) -> None:
        """Should prefer the display name and lower-case the email."""
        mock_http_client.request.return_value = httpx.Response(
            200,
            json={
                "id": "42",
                "email": "Cook@Example.com",
                "verified": True,
                "username": "cook42",
                "global_name": "Cook",
            },
        )

        identity = await client.fetch_identity("tok")

        assert identity.oauth_id == "discord:42"
        assert identity.email == "cook@example.com"
        assert identity.name == "Cook"
        headers = mock_http_client.request.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer tok"

    @pytest.mark.parametrize(
        "payload",
        [
            {"id": "42", "username": "cook42"},
            {"id": "42", "email": "cook@example.com", "verified": False},
        ],
    )
    async def test_requires_verified_email(
        self,
        client: OAuthClient,
        mock_http_client: MagicMock,
        payload: dict[str, object],
    ) -> None:
        mock_http_client.request.return_value = httpx.Response(200, json=payload)

        with pytest.raises(OAuthIdentityError):
            await client.fetch_identity("tok")
