"""Unit tests for RecipeService."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from recipes_api.database.exceptions import DuplicateRecordError, MissingReferenceError
from recipes_api.database.repositories.ingredients import IngredientRecord
from recipes_api.database.repositories.recipes import (
    RecipeIngredientRecord,
    RecipeOverview,
    RecipeWithIngredients,
)
from recipes_api.schemas.enums import Difficulty, FoodCategory, MealType
from recipes_api.schemas.recipe import RecipeCreate
from recipes_api.services.recipes.exceptions import (
    RecipeAlreadyExistsError,
    RecipeNotFoundError,
    RecipePermissionError,
    UnknownIngredientsError,
)
from recipes_api.services.recipes.service import RecipeService


if TYPE_CHECKING:
    from collections.abc import Callable

    from recipes_api.database.repositories.users import UserRecord


pytestmark = pytest.mark.unit

NOW = datetime(2024, 1, 1, tzinfo=UTC)


def _ingredient(name: str) -> IngredientRecord:
    return IngredientRecord(
        id=uuid4(),
        name=name,
        calories_per_100g=20,
        category=[FoodCategory.VEGETABLE],
        g_per_piece=None,
        uploaded_by=None,
        created_at=NOW,
    )


def _recipe(owner: UserRecord, **overrides: Any) -> RecipeWithIngredients:
    fields: dict[str, Any] = {
        "id": uuid4(),
        "uploaded_by": owner.id,
        "uploader_name": owner.name,
        "name": "Tomato Soup",
        "description": "Warm",
        "prep_time": 10,
        "cook_time": 20,
        "difficulty": Difficulty.EASY,
        "cuisine": "italian",
        "meal_type": MealType.DINNER,
        "steps": ["Chop", "Boil"],
        "created_at": NOW,
        "updated_at": NOW,
        "ingredients": [
            RecipeIngredientRecord(
                ingredient_id=uuid4(),
                name="tomato",
                quantity=3,
                quantity_unit="pcs",
                calories_per_100g=18,
            )
        ],
    }
    fields.update(overrides)
    return RecipeWithIngredients(**fields)


def _body(**overrides: Any) -> RecipeCreate:
    fields: dict[str, Any] = {
        "name": "Tomato Soup",
        "description": "Warm",
        "prep_time": 10,
        "cook_time": 20,
        "difficulty": "easy",
        "cuisine": "Italian",
        "meal_type": "dinner",
        "steps": ["Chop", "Boil"],
        "ingredients": [{"name": "Tomato", "quantity": 3, "quantity_unit": "pcs"}],
    }
    fields.update(overrides)
    return RecipeCreate(**fields)


@pytest.fixture
def recipes() -> MagicMock:
    repository = MagicMock()
    for method in ("get_by_name", "list_page", "list_by_user", "create", "update", "delete"):
        setattr(repository, method, AsyncMock(return_value=None))
    return repository


@pytest.fixture
def ingredients() -> MagicMock:
    repository = MagicMock()
    repository.get_by_names = AsyncMock(return_value={"tomato": _ingredient("tomato")})
    return repository


@pytest.fixture
def service(recipes: MagicMock, ingredients: MagicMock) -> RecipeService:
    return RecipeService(recipes, ingredients)


class TestBrowse:
    """Tests for listing and reading recipes."""

    async def test_list_recipes_paginates(
        self,
        service: RecipeService,
        recipes: MagicMock,
        make_user: Callable[..., UserRecord],
    ) -> None:
        """Should translate page numbers into offsets."""
        recipes.list_page.return_value = ([_recipe(make_user())], 21)

        page = await service.list_recipes(page=3, page_size=10)

        recipes.list_page.assert_awaited_once_with(limit=10, offset=20)
        assert page.total == 21
        assert page.items[0].uploader_name == "Cook"

    async def test_get_recipe(
        self,
        service: RecipeService,
        recipes: MagicMock,
        make_user: Callable[..., UserRecord],
    ) -> None:
        owner = make_user()
        recipes.get_by_name.return_value = _recipe(owner)

        detail = await service.get_recipe("Tomato Soup")

        assert detail.uploaded_by.id == owner.id
        assert detail.ingredients[0].name == "tomato"

    async def test_get_recipe_missing(self, service: RecipeService) -> None:
        with pytest.raises(RecipeNotFoundError):
            await service.get_recipe("nope")

    async def test_my_recipes(
        self,
        service: RecipeService,
        recipes: MagicMock,
        make_user: Callable[..., UserRecord],
    ) -> None:
        recipes.list_by_user.return_value = [
            RecipeOverview(name="Soup", description="Warm", ingredient_count=2)
        ]

        result = await service.my_recipes(make_user())

        assert [r.name for r in result] == ["Soup"]


class TestCreate:
    """Tests for RecipeService.create_recipe."""

    async def test_resolves_ingredients_and_reindexes(
        self,
        service: RecipeService,
        recipes: MagicMock,
        ingredients: MagicMock,
        make_user: Callable[..., UserRecord],
        no_enqueue: dict[str, AsyncMock],
    ) -> None:
        """Should write lines by ingredient id and schedule a recipe reindex."""
        user = make_user()
        recipes.create.return_value = _recipe(user)

        detail = await service.create_recipe(user, _body())

        ingredients.get_by_names.assert_awaited_once_with(["tomato"])
        uploaded_by, data, lines = recipes.create.await_args.args
        assert uploaded_by == user.id
        assert data.cuisine == "italian"
        assert lines[0].ingredient_id == ingredients.get_by_names.return_value["tomato"].id
        assert detail.name == "Tomato Soup"
        no_enqueue["recipes"].assert_awaited_once()

    async def test_unknown_ingredients(
        self,
        service: RecipeService,
        recipes: MagicMock,
        make_user: Callable[..., UserRecord],
        no_enqueue: dict[str, AsyncMock],
    ) -> None:
        """Should list every ingredient name that is not in the catalogue."""
        body = _body(
            ingredients=[
                {"name": "tomato", "quantity": 1, "quantity_unit": "pcs"},
                {"name": "unobtainium", "quantity": 1, "quantity_unit": "g"},
            ]
        )

        with pytest.raises(UnknownIngredientsError) as exc_info:
            await service.create_recipe(make_user(), body)

        assert exc_info.value.names == ["unobtainium"]
        recipes.create.assert_not_awaited()
        no_enqueue["recipes"].assert_not_awaited()

    async def test_duplicate_name(
        self,
        service: RecipeService,
        recipes: MagicMock,
        make_user: Callable[..., UserRecord],
        no_enqueue: dict[str, AsyncMock],
    ) -> None:
        recipes.create.side_effect = DuplicateRecordError("Recipe", "name", "Tomato Soup")

        with pytest.raises(RecipeAlreadyExistsError):
            await service.create_recipe(make_user(), _body())

    async def test_ingredient_deleted_meanwhile(
        self,
        service: RecipeService,
        recipes: MagicMock,
        make_user: Callable[..., UserRecord],
        no_enqueue: dict[str, AsyncMock],
    ) -> None:
        recipes.create.side_effect = MissingReferenceError("Ingredient")

        with pytest.raises(UnknownIngredientsError):
            await service.create_recipe(make_user(), _body())


class TestModify:
    """Tests for update and delete permissions."""

    async def test_owner_can_update(
        self,
        service: RecipeService,
        recipes: MagicMock,
        make_user: Callable[..., UserRecord],
        no_enqueue: dict[str, AsyncMock],
    ) -> None:
        owner = make_user()
        existing = _recipe(owner)
        recipes.get_by_name.return_value = existing
        recipes.update.return_value = _recipe(owner, id=existing.id, description="New")

        detail = await service.update_recipe(owner, "Tomato Soup", _body(description="New"))

        assert detail.description == "New"
        assert recipes.update.await_args.args[0] == existing.id
        no_enqueue["recipes"].assert_awaited_once()

    async def test_non_owner_cannot_update(
        self,
        service: RecipeService,
        recipes: MagicMock,
        make_user: Callable[..., UserRecord],
        no_enqueue: dict[str, AsyncMock],
    ) -> None:
        """Should refuse changes from other users."""
        recipes.get_by_name.return_value = _recipe(make_user())

        with pytest.raises(RecipePermissionError):
            await service.update_recipe(make_user(), "Tomato Soup", _body())

        recipes.update.assert_not_awaited()

    async def test_admin_can_delete(
        self,
        service: RecipeService,
        recipes: MagicMock,
        make_user: Callable[..., UserRecord],
        no_enqueue: dict[str, AsyncMock],
    ) -> None:
        """Should let admins delete other users' recipes."""
        existing = _recipe(make_user())
        recipes.get_by_name.return_value = existing
        recipes.delete.return_value = True

        await service.delete_recipe(make_user(is_admin=True), "Tomato Soup")

        recipes.delete.assert_awaited_once_with(existing.id)
        no_enqueue["recipe_removal"].assert_awaited_once_with(existing.id)
        no_enqueue["recipes"].assert_not_awaited()

    async def test_delete_missing(
        self,
        service: RecipeService,
        make_user: Callable[..., UserRecord],
        no_enqueue: dict[str, AsyncMock],
    ) -> None:
        with pytest.raises(RecipeNotFoundError):
            await service.delete_recipe(make_user(), "nope")

    async def test_delete_race(
        self,
        service: RecipeService,
        recipes: MagicMock,
        make_user: Callable[..., UserRecord],
        no_enqueue: dict[str, AsyncMock],
    ) -> None:
        """Should report not found when the row vanished before the delete."""
        owner = make_user()
        recipes.get_by_name.return_value = _recipe(owner)
        recipes.delete.return_value = False

        with pytest.raises(RecipeNotFoundError):
            await service.delete_recipe(owner, "Tomato Soup")
