"""Unit tests for the asyncpg repositories using a mocked pool."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import asyncpg
import pytest

from recipes_api.database.exceptions import DuplicateRecordError, MissingReferenceError
from recipes_api.database.repositories.ingredients import IngredientRepository
from recipes_api.database.repositories.recipes import (
    RecipeData,
    RecipeIngredientData,
    RecipeRepository,
)
from recipes_api.database.repositories.users import UserRepository
from recipes_api.schemas.enums import Difficulty, FoodCategory, MealType


pytestmark = pytest.mark.unit

NOW = datetime(2024, 1, 1, tzinfo=UTC)


def _mock_pool() -> tuple[MagicMock, MagicMock]:
    conn = MagicMock()
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchrow = AsyncMock(return_value=None)
    conn.fetchval = AsyncMock(return_value=None)
    conn.execute = AsyncMock(return_value="UPDATE 0")
    conn.executemany = AsyncMock()
    pool = MagicMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    return pool, conn


def _unique_violation(constraint: str) -> asyncpg.UniqueViolationError:
    error = asyncpg.UniqueViolationError("duplicate key value")
    error.constraint_name = constraint
    return error


def _user_row(**overrides: Any) -> dict[str, Any]:
    row = {
        "id": uuid4(),
        "email": "cook@example.com",
        "name": "Cook",
        "password_hash": "$2b$12$hash",
        "oauth_id": None,
        "bio": None,
        "is_confirmed": False,
        "is_admin": False,
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


def _ingredient_row(**overrides: Any) -> dict[str, Any]:
    row = {
        "id": uuid4(),
        "name": "tomato",
        "calories_per_100g": 18,
        "category": ["vegetable", "fruit"],
        "g_per_piece": None,
        "uploaded_by": None,
        "created_at": NOW,
    }
    row.update(overrides)
    return row


def _recipe_row(**overrides: Any) -> dict[str, Any]:
    row = {
        "id": uuid4(),
        "uploaded_by": uuid4(),
        "uploader_name": "Cook",
        "name": "Tomato Soup",
        "description": "Warm",
        "prep_time": 10,
        "cook_time": 20,
        "difficulty": "easy",
        "cuisine": "italian",
        "meal_type": "dinner",
        "steps": ["Chop", "Boil"],
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


def _recipe_data() -> RecipeData:
    return RecipeData(
        name="Tomato Soup",
        description="Warm",
        prep_time=10,
        cook_time=20,
        difficulty=Difficulty.EASY,
        cuisine="italian",
        meal_type=MealType.DINNER,
        steps=["Chop", "Boil"],
    )


class TestUserRepository:
    """Tests for UserRepository."""

    async def test_get_by_email_maps_row(self) -> None:
        """Should return a UserRecord for a matching row."""
        pool, conn = _mock_pool()
        row = _user_row()
        conn.fetchrow.return_value = row

        user = await UserRepository(pool).get_by_email("Cook@Example.com")

        assert user is not None
        assert user.id == row["id"]
        assert "LOWER($1)" in conn.fetchrow.call_args.args[0]

    async def test_get_by_id_missing(self) -> None:
        pool, _ = _mock_pool()

        assert await UserRepository(pool).get_by_id(uuid4()) is None

    async def test_create_duplicate_email(self) -> None:
        """Should map a unique violation on email to DuplicateRecordError."""
        pool, conn = _mock_pool()
        conn.fetchrow.side_effect = _unique_violation("users_email_key")

        with pytest.raises(DuplicateRecordError) as exc_info:
            await UserRepository(pool).create(
                email="Cook@Example.com", name="Cook", password_hash="h"
            )

        assert exc_info.value.field == "email"
        assert exc_info.value.value == "cook@example.com"

    async def test_create_duplicate_oauth_id(self) -> None:
        pool, conn = _mock_pool()
        conn.fetchrow.side_effect = _unique_violation("users_oauth_id_key")

        with pytest.raises(DuplicateRecordError) as exc_info:
            await UserRepository(pool).create(
                email="a@example.com", name="A", oauth_id="discord:1"
            )

        assert exc_info.value.field == "oauth_id"

    async def test_confirm_reports_missing_user(self) -> None:
        """Should return False when no row was updated."""
        pool, conn = _mock_pool()
        conn.execute.return_value = "UPDATE 0"

        assert await UserRepository(pool).confirm(uuid4()) is False

        conn.execute.return_value = "UPDATE 1"
        assert await UserRepository(pool).confirm(uuid4()) is True

    async def test_link_oauth_guards_existing_identity(self) -> None:
        """Should only link unlinked accounts and clear the password on request."""
        pool, conn = _mock_pool()
        user_id = uuid4()
        conn.fetchrow.return_value = _user_row(
            id=user_id, oauth_id="discord:42", password_hash=None, is_confirmed=True
        )

        linked = await UserRepository(pool).link_oauth(
            user_id, "discord:42", revoke_password=True
        )

        query, *args = conn.fetchrow.call_args.args
        assert args == [user_id, "discord:42", True]
        assert "oauth_id IS NULL OR oauth_id = $2" in query
        assert "password_hash = CASE WHEN $3 THEN NULL" in query
        assert linked is not None
        assert linked.password_hash is None

    async def test_link_oauth_already_linked(self) -> None:
        pool, conn = _mock_pool()
        conn.fetchrow.return_value = None

        assert await UserRepository(pool).link_oauth(uuid4(), "discord:42") is None
        assert conn.fetchrow.call_args.args[3] is False

    async def test_count_recipes(self) -> None:
        pool, conn = _mock_pool()
        conn.fetchval.return_value = 3

        assert await UserRepository(pool).count_recipes(uuid4()) == 3


class TestIngredientRepository:
    """Tests for IngredientRepository."""

    async def test_get_by_names_keys_by_name(self) -> None:
        """Should index the found ingredients by name."""
        pool, conn = _mock_pool()
        conn.fetch.return_value = [_ingredient_row(), _ingredient_row(name="basil")]

        found = await IngredientRepository(pool).get_by_names(["Tomato", "basil"])

        assert set(found) == {"tomato", "basil"}
        assert found["tomato"].category == [FoodCategory.VEGETABLE, FoodCategory.FRUIT]

    async def test_list_page_returns_total(self) -> None:
        pool, conn = _mock_pool()
        conn.fetch.return_value = [_ingredient_row()]
        conn.fetchval.return_value = 41

        items, total = await IngredientRepository(pool).list_page(limit=1, offset=0)

        assert len(items) == 1
        assert total == 41

    async def test_create_passes_categories_as_text(self) -> None:
        pool, conn = _mock_pool()
        conn.fetchrow.return_value = _ingredient_row(g_per_piece=120)

        record = await IngredientRepository(pool).create(
            name="Tomato",
            calories_per_100g=18,
            category=[FoodCategory.VEGETABLE],
            g_per_piece=120,
            uploaded_by=None,
        )

        assert conn.fetchrow.call_args.args[3] == ["vegetable"]
        assert record.g_per_piece == 120.0

    async def test_create_duplicate(self) -> None:
        """Should map a unique violation to DuplicateRecordError."""
        pool, conn = _mock_pool()
        conn.fetchrow.side_effect = _unique_violation("ingredients_name_key")

        with pytest.raises(DuplicateRecordError, match="tomato"):
            await IngredientRepository(pool).create(
                name="Tomato",
                calories_per_100g=18,
                category=[FoodCategory.VEGETABLE],
                g_per_piece=None,
                uploaded_by=None,
            )


class TestRecipeRepository:
    """Tests for RecipeRepository."""

    async def test_get_by_name_attaches_ingredients(self) -> None:
        """Should load the recipe and its ingredient lines."""
        pool, conn = _mock_pool()
        row = _recipe_row()
        conn.fetchrow.return_value = row
        conn.fetch.return_value = [
            {
                "recipe_id": row["id"],
                "ingredient_id": uuid4(),
                "name": "tomato",
                "quantity": 3,
                "quantity_unit": "pcs",
                "calories_per_100g": 18,
            }
        ]

        recipe = await RecipeRepository(pool).get_by_name("Tomato Soup")

        assert recipe is not None
        assert recipe.difficulty == Difficulty.EASY
        assert [line.name for line in recipe.ingredients] == ["tomato"]

    async def test_get_by_name_missing(self) -> None:
        pool, _ = _mock_pool()

        assert await RecipeRepository(pool).get_by_name("nope") is None

    async def test_create_writes_lines_in_transaction(self) -> None:
        """Should insert the recipe and its lines, then reload it."""
        pool, conn = _mock_pool()
        row = _recipe_row()
        conn.fetchval.return_value = row["id"]
        conn.fetchrow.return_value = row
        line = RecipeIngredientData(
            ingredient_id=uuid4(), quantity=2, quantity_unit="pcs"
        )

        recipe = await RecipeRepository(pool).create(
            row["uploaded_by"], _recipe_data(), [line]
        )

        conn.transaction.assert_called_once()
        rows = conn.executemany.call_args.args[1]
        assert rows == [(row["id"], line.ingredient_id, 2.0, "pcs")]
        assert recipe.name == "Tomato Soup"

    async def test_create_duplicate_name(self) -> None:
        pool, conn = _mock_pool()
        conn.fetchval.side_effect = _unique_violation("recipes_name_key")

        with pytest.raises(DuplicateRecordError):
            await RecipeRepository(pool).create(uuid4(), _recipe_data(), [])

    async def test_create_missing_ingredient(self) -> None:
        """Should map a foreign key violation to MissingReferenceError."""
        pool, conn = _mock_pool()
        conn.fetchval.return_value = uuid4()
        conn.executemany.side_effect = asyncpg.ForeignKeyViolationError("fk")

        with pytest.raises(MissingReferenceError):
            await RecipeRepository(pool).create(uuid4(), _recipe_data(), [])

    async def test_update_missing_recipe(self) -> None:
        """Should return None and leave ingredient lines alone."""
        pool, conn = _mock_pool()
        conn.execute.return_value = "UPDATE 0"

        assert await RecipeRepository(pool).update(uuid4(), _recipe_data(), []) is None
        conn.executemany.assert_not_called()

    async def test_delete(self) -> None:
        pool, conn = _mock_pool()
        conn.execute.return_value = "DELETE 1"

        assert await RecipeRepository(pool).delete(uuid4()) is True

    async def test_list_by_user(self) -> None:
        pool, conn = _mock_pool()
        conn.fetch.return_value = [
            {"name": "Soup", "description": "Warm", "ingredient_count": 4}
        ]

        overviews = await RecipeRepository(pool).list_by_user(uuid4())

        assert overviews[0].ingredient_count == 4
