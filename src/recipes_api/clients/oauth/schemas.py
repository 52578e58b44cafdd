"""Identity provider payloads."""

from __future__ import annotations

from pydantic import Field

from recipes_api.schemas.base import DownstreamResponse


class TokenResponse(DownstreamResponse):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None
    scope: str | None = None


class UserInfo(DownstreamResponse):
    """User info as returned by the provider.

    Providers disagree on naming, so the display name is taken from the
    first of ``global_name``, ``name`` or ``username`` that is set.
    """

    id: str
    email: str | None = None
    verified: bool | None = None
    name: str | None = None
    global_name: str | None = None
    username: str | None = None


class OAuthIdentity(DownstreamResponse):
    """Normalized identity handed to the auth service."""

    provider: str
    subject: str = Field(..., description="Provider-scoped user id")
    email: str
    name: str

    @property
    def oauth_id(self) -> str:
        return f"{self.provider}:{self.subject}"
