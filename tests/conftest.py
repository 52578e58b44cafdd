"""Shared test fixtures and configuration for the Recipes API tests.

Environment variables are set before anything from ``recipes_api`` is
imported: settings, the rate limiter and the metrics registry are all
created at import time.
"""

from __future__ import annotations

import os


os.environ["APP_ENV"] = "test"
os.environ["SESSION_SECRET"] = "test-session-secret-" + "s" * 64
os.environ["TOKEN_SECRET_KEY"] = "test-token-secret-key"
os.environ["MEILI_MASTER_KEY"] = "test-meili-key"
os.environ["EMAIL_AUTHORIZATION_TOKEN"] = "test-email-token"

from collections.abc import AsyncGenerator, Callable, Generator  # noqa: E402
from datetime import UTC, datetime  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock, patch  # noqa: E402
from uuid import UUID, uuid4  # noqa: E402

import pytest  # noqa: E402
from fakeredis import FakeAsyncRedis  # noqa: E402

from recipes_api.core.config import Settings, get_settings  # noqa: E402
from recipes_api.database.repositories.users import UserRecord  # noqa: E402
from recipes_api.session.store import RedisSessionStore  # noqa: E402


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Reload settings for every test so env patches take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def no_enqueue() -> Generator[dict[str, AsyncMock]]:
    """Stub out every background-job enqueue used by the services."""
    mocks = {
        "confirmation": AsyncMock(return_value=None),
        "ingredients": AsyncMock(return_value=None),
        "recipes": AsyncMock(return_value=None),
        "recipe_removal": AsyncMock(return_value=None),
    }
    with (
        patch(
            "recipes_api.services.auth.service.enqueue_confirmation_email",
            mocks["confirmation"],
        ),
        patch(
            "recipes_api.services.ingredients.service.enqueue_ingredients_reindex",
            mocks["ingredients"],
        ),
        patch(
            "recipes_api.services.recipes.service.enqueue_recipes_reindex",
            mocks["recipes"],
        ),
        patch(
            "recipes_api.services.recipes.service.enqueue_recipe_removal",
            mocks["recipe_removal"],
        ),
    ):
        yield mocks


@pytest.fixture
async def fake_redis() -> AsyncGenerator[FakeAsyncRedis]:
    client = FakeAsyncRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def session_store(fake_redis: FakeAsyncRedis) -> RedisSessionStore:
    return RedisSessionStore(fake_redis, prefix="session:")


@pytest.fixture
def make_user() -> Callable[..., UserRecord]:
    """Build a ``UserRecord`` with sensible defaults."""

    def _make_user(**overrides: Any) -> UserRecord:
        now = datetime(2024, 1, 1, tzinfo=UTC)
        fields: dict[str, Any] = {
            "id": uuid4(),
            "email": "cook@example.com",
            "name": "Cook",
            "password_hash": "$2b$12$hash",
            "oauth_id": None,
            "bio": None,
            "is_confirmed": True,
            "is_admin": False,
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        return UserRecord(**fields)

    return _make_user


@pytest.fixture
def user_id() -> UUID:
    return UUID("11111111-1111-1111-1111-111111111111")
