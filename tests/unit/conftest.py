"""Unit test configuration.

Unit tests should be fast and isolated - no external dependencies. The app
fixtures below use fakeredis for sessions and override every repository and
service dependency.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from recipes_api.api.dependencies import (
    get_auth_service,
    get_ingredient_service,
    get_recipe_service,
    get_user_service,
)
from recipes_api.auth.dependencies import get_user_repository
from recipes_api.factory import create_app


if TYPE_CHECKING:
    from fastapi import FastAPI

    from recipes_api.core.config import Settings
    from recipes_api.database.repositories.users import UserRecord
    from recipes_api.session.store import RedisSessionStore


# Mark all tests in this directory as unit tests
pytestmark = pytest.mark.unit


@pytest.fixture
def user_repository() -> MagicMock:
    """Repository consulted by the current-user dependency."""
    repository = MagicMock()
    repository.get_by_id = AsyncMock(return_value=None)
    return repository


@pytest.fixture
def auth_service() -> MagicMock:
    return MagicMock(
        register=AsyncMock(),
        authenticate=AsyncMock(),
        confirm_email=AsyncMock(),
        login_oauth=AsyncMock(),
    )


@pytest.fixture
def user_service() -> MagicMock:
    return MagicMock(update_profile=AsyncMock(), public_profile=AsyncMock())


@pytest.fixture
def recipe_service() -> MagicMock:
    return MagicMock(
        list_recipes=AsyncMock(),
        get_recipe=AsyncMock(),
        my_recipes=AsyncMock(),
        create_recipe=AsyncMock(),
        update_recipe=AsyncMock(),
        delete_recipe=AsyncMock(),
    )


@pytest.fixture
def ingredient_service() -> MagicMock:
    return MagicMock(
        list_ingredients=AsyncMock(),
        get_ingredient=AsyncMock(),
        create_ingredient=AsyncMock(),
    )


@pytest.fixture
def app(
    settings: Settings,
    session_store: RedisSessionStore,
    user_repository: MagicMock,
    auth_service: MagicMock,
    user_service: MagicMock,
    recipe_service: MagicMock,
    ingredient_service: MagicMock,
) -> FastAPI:
    """App wired to fakeredis sessions and mocked services.

    The lifespan does not run, so no database or Redis pool is opened.
    """
    test_app = create_app(settings, session_store=session_store)
    test_app.dependency_overrides[get_user_repository] = lambda: user_repository
    test_app.dependency_overrides[get_auth_service] = lambda: auth_service
    test_app.dependency_overrides[get_user_service] = lambda: user_service
    test_app.dependency_overrides[get_recipe_service] = lambda: recipe_service
    test_app.dependency_overrides[get_ingredient_service] = lambda: ingredient_service
    return test_app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def login_as(
    client: httpx.AsyncClient,
    auth_service: MagicMock,
    user_repository: MagicMock,
) -> Callable[[UserRecord], Any]:
    """Log ``user`` in through ``POST /login`` so the client holds a cookie."""

    async def _login(user: UserRecord) -> httpx.Response:
        auth_service.authenticate.return_value = user
        user_repository.get_by_id.return_value = user
        response = await client.post(
            "/login", json={"email": user.email, "password": "correct-horse"}
        )
        assert response.status_code == 200
        return response

    return _login
