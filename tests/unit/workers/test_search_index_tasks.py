"""Unit tests for the search indexing tasks."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from recipes_api.core.config import Settings
from recipes_api.database.repositories.ingredients import IngredientRecord
from recipes_api.database.repositories.recipes import (
    RecipeIngredientRecord,
    RecipeWithIngredients,
)
from recipes_api.schemas.enums import Difficulty, FoodCategory, MealType
from recipes_api.workers.tasks.search_index import (
    index_ingredients,
    index_recipes,
    reindex_search,
    remove_recipe_document,
)


pytestmark = pytest.mark.unit

NOW = datetime(2024, 1, 1, tzinfo=UTC)


def _ingredient() -> IngredientRecord:
    return IngredientRecord(
        id=uuid4(),
        name="tomato",
        calories_per_100g=18.0,
        category=[FoodCategory.VEGETABLE, FoodCategory.FRUIT],
        g_per_piece=120.0,
        uploaded_by=None,
        created_at=NOW,
    )


def _recipe() -> RecipeWithIngredients:
    tomato = _ingredient()
    return RecipeWithIngredients(
        id=uuid4(),
        name="Tomato soup",
        description="Warm and red",
        prep_time=10,
        cook_time=30,
        difficulty=Difficulty.EASY,
        cuisine="italian",
        meal_type=MealType.LUNCH,
        steps=["Chop", "Simmer"],
        uploaded_by=uuid4(),
        uploader_name="Cook",
        created_at=NOW,
        updated_at=NOW,
        ingredients=[
            RecipeIngredientRecord(
                ingredient_id=tomato.id,
                name=tomato.name,
                quantity=4,
                quantity_unit="piece",
                calories_per_100g=tomato.calories_per_100g,
            )
        ],
    )


@pytest.fixture
def ctx(settings: Settings) -> dict[str, Any]:
    search_client = MagicMock()
    search_client.add_documents = AsyncMock(return_value={"taskUid": 1})
    search_client.delete_document = AsyncMock()
    ingredient_repository = MagicMock()
    ingredient_repository.list_all = AsyncMock(return_value=[_ingredient()])
    recipe_repository = MagicMock()
    recipe_repository.list_all = AsyncMock(return_value=[_recipe()])
    return {
        "settings": settings,
        "search_client": search_client,
        "ingredient_repository": ingredient_repository,
        "recipe_repository": recipe_repository,
    }


class TestIndexIngredients:
    async def test_pushes_documents(self, ctx: dict[str, Any]) -> None:
        """Should upsert every ingredient into the ingredients index."""
        result = await index_ingredients(ctx)

        index, documents = ctx["search_client"].add_documents.call_args.args
        assert index == "ingredients"
        assert documents[0]["name"] == "tomato"
        assert documents[0]["category"] == ["vegetable", "fruit"]
        assert result == {"index": "ingredients", "documents": 1}

    async def test_empty_table(self, ctx: dict[str, Any]) -> None:
        """Should not call the search service when there is nothing to index."""
        ctx["ingredient_repository"].list_all.return_value = []

        result = await index_ingredients(ctx)

        ctx["search_client"].add_documents.assert_not_awaited()
        assert result["documents"] == 0


class TestIndexRecipes:
    async def test_document_includes_ingredient_names(
        self, ctx: dict[str, Any]
    ) -> None:
        await index_recipes(ctx)

        index, documents = ctx["search_client"].add_documents.call_args.args
        assert index == "recipes"
        assert documents[0]["ingredients"] == ["tomato"]
        assert documents[0]["difficulty"] == "easy"
        assert documents[0]["meal_type"] == "lunch"

    async def test_search_errors_propagate(self, ctx: dict[str, Any]) -> None:
        """Should let the failure reach arq so the job is retried."""
        ctx["search_client"].add_documents.side_effect = RuntimeError("down")

        with pytest.raises(RuntimeError):
            await index_recipes(ctx)


class TestReindexSearch:
    async def test_indexes_both(self, ctx: dict[str, Any]) -> None:
        result = await reindex_search(ctx)

        assert result == {"ingredients": 1, "recipes": 1}
        assert ctx["search_client"].add_documents.await_count == 2


class TestRemoveRecipeDocument:
    async def test_deletes_from_recipes_index(self, ctx: dict[str, Any]) -> None:
        """Should remove a deleted recipe so search stops returning it."""
        recipe_id = str(uuid4())

        result = await remove_recipe_document(ctx, recipe_id)

        ctx["search_client"].delete_document.assert_awaited_once_with("recipes", recipe_id)
        ctx["search_client"].add_documents.assert_not_awaited()
        assert result == {"index": "recipes", "removed": recipe_id}
