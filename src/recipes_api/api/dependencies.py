"""FastAPI dependencies for service access.

Services holding only a repository are cheap and built per request; HTTP
clients are created once in the lifespan and read from ``app.state``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

from recipes_api.core.exceptions import NotFoundException, ServiceUnavailableException
from recipes_api.services.auth.service import AuthService
from recipes_api.services.ingredients.service import IngredientService
from recipes_api.services.recipes.service import RecipeService
from recipes_api.services.users.service import UserService


if TYPE_CHECKING:
    from recipes_api.clients.oauth.client import OAuthClient
    from recipes_api.clients.search.client import SearchClient


def get_auth_service() -> AuthService:
    return AuthService()


def get_user_service() -> UserService:
    return UserService()


def get_recipe_service() -> RecipeService:
    return RecipeService()


def get_ingredient_service() -> IngredientService:
    return IngredientService()


async def get_search_client(request: Request) -> SearchClient:
    """Get the search client from app state.

    Raises:
        ServiceUnavailableException: If the client was not initialized.
    """
    client: SearchClient | None = getattr(request.app.state, "search_client", None)
    if client is None:
        msg = "Search service not available"
        raise ServiceUnavailableException(msg)
    return client


async def get_oauth_client(request: Request) -> OAuthClient:
    """Get the OAuth client from app state.

    Raises:
        NotFoundException: If OAuth login is not enabled.
    """
    client: OAuthClient | None = getattr(request.app.state, "oauth_client", None)
    if client is None:
        raise NotFoundException("OAuth provider", "login")
    return client
