"""OAuth2 identity provider client."""

from recipes_api.clients.oauth.client import OAuthClient
from recipes_api.clients.oauth.exceptions import (
    OAuthError,
    OAuthExchangeError,
    OAuthIdentityError,
    OAuthUnavailableError,
)
from recipes_api.clients.oauth.schemas import OAuthIdentity


__all__ = [
    "OAuthClient",
    "OAuthError",
    "OAuthExchangeError",
    "OAuthIdentity",
    "OAuthIdentityError",
    "OAuthUnavailableError",
]
