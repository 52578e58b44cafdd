"""OAuth provider client exceptions."""

from __future__ import annotations


class OAuthError(Exception):
    """Base exception for OAuth client errors."""


class OAuthUnavailableError(OAuthError):
    """The identity provider could not be reached."""


class OAuthExchangeError(OAuthError):
    """The provider rejected the authorization code or access token."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class OAuthIdentityError(OAuthError):
    """The provider's user info lacks something we need (usually an email)."""
