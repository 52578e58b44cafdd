"""Recipe browsing and authoring."""

from __future__ import annotations

from typing import TYPE_CHECKING

from recipes_api.database.exceptions import DuplicateRecordError, MissingReferenceError
from recipes_api.database.repositories.ingredients import IngredientRepository
from recipes_api.database.repositories.recipes import (
    RecipeData,
    RecipeIngredientData,
    RecipeRepository,
)
from recipes_api.observability.logging import get_logger
from recipes_api.schemas.common import Page
from recipes_api.schemas.recipe import (
    MyRecipe,
    RecipeDetail,
    RecipeIngredientResponse,
    RecipeSummary,
    Uploader,
)
from recipes_api.services.recipes.exceptions import (
    RecipeAlreadyExistsError,
    RecipeNotFoundError,
    RecipePermissionError,
    UnknownIngredientsError,
)
from recipes_api.workers.jobs import enqueue_recipe_removal, enqueue_recipes_reindex


if TYPE_CHECKING:
    from recipes_api.database.repositories.recipes import (
        RecipeRecord,
        RecipeWithIngredients,
    )
    from recipes_api.database.repositories.users import UserRecord
    from recipes_api.schemas.recipe import RecipeCreate

logger = get_logger(__name__)


def to_recipe_detail(record: RecipeWithIngredients) -> RecipeDetail:
    return RecipeDetail(
        id=record.id,
        name=record.name,
        description=record.description,
        prep_time=record.prep_time,
        cook_time=record.cook_time,
        difficulty=record.difficulty,
        cuisine=record.cuisine,
        meal_type=record.meal_type,
        steps=record.steps,
        ingredients=[
            RecipeIngredientResponse(
                name=line.name,
                quantity=line.quantity,
                quantity_unit=line.quantity_unit,
                calories_per_100g=line.calories_per_100g,
            )
            for line in record.ingredients
        ],
        uploaded_by=Uploader(id=record.uploaded_by, name=record.uploader_name),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def to_recipe_summary(record: RecipeRecord) -> RecipeSummary:
    return RecipeSummary.model_validate(record)


class RecipeService:
    def __init__(
        self,
        recipes: RecipeRepository | None = None,
        ingredients: IngredientRepository | None = None,
    ) -> None:
        self.recipes = recipes or RecipeRepository()
        self.ingredients = ingredients or IngredientRepository()

    async def list_recipes(self, *, page: int, page_size: int) -> Page[RecipeSummary]:
        records, total = await self.recipes.list_page(
            limit=page_size, offset=(page - 1) * page_size
        )
        return Page[RecipeSummary](
            items=[to_recipe_summary(r) for r in records],
            total=total,
            page=page,
            page_size=page_size,
        )

    async def get_recipe(self, name: str) -> RecipeDetail:
        record = await self.recipes.get_by_name(name)
        if record is None:
            raise RecipeNotFoundError(name)
        return to_recipe_detail(record)

    async def my_recipes(self, user: UserRecord) -> list[MyRecipe]:
        overviews = await self.recipes.list_by_user(user.id)
        return [
            MyRecipe(
                name=o.name,
                description=o.description,
                ingredient_count=o.ingredient_count,
            )
            for o in overviews
        ]

    async def create_recipe(self, user: UserRecord, data: RecipeCreate) -> RecipeDetail:
        """Store a new recipe owned by ``user``.

        Raises:
            UnknownIngredientsError: If an ingredient name is not in the catalogue.
            RecipeAlreadyExistsError: If the name is taken.
        """
        lines = await self._resolve_ingredients(data)
        try:
            record = await self.recipes.create(user.id, self._recipe_data(data), lines)
        except DuplicateRecordError as e:
            raise RecipeAlreadyExistsError(data.name) from e
        except MissingReferenceError as e:
            raise UnknownIngredientsError([i.name for i in data.ingredients]) from e

        await enqueue_recipes_reindex()
        return to_recipe_detail(record)

    async def update_recipe(
        self, user: UserRecord, name: str, data: RecipeCreate
    ) -> RecipeDetail:
        """Replace a recipe; only its uploader or an admin may do so.

        Raises:
            RecipeNotFoundError: If there is no recipe called ``name``.
            RecipePermissionError: If ``user`` may not modify it.
            UnknownIngredientsError: If an ingredient name is not in the catalogue.
            RecipeAlreadyExistsError: If renamed to a name that is taken.
        """
        existing = await self._get_owned(user, name)
        lines = await self._resolve_ingredients(data)
        try:
            record = await self.recipes.update(
                existing.id, self._recipe_data(data), lines
            )
        except DuplicateRecordError as e:
            raise RecipeAlreadyExistsError(data.name) from e
        except MissingReferenceError as e:
            raise UnknownIngredientsError([i.name for i in data.ingredients]) from e

        if record is None:
            raise RecipeNotFoundError(name)

        await enqueue_recipes_reindex()
        return to_recipe_detail(record)

    async def delete_recipe(self, user: UserRecord, name: str) -> None:
        existing = await self._get_owned(user, name)
        if not await self.recipes.delete(existing.id):
            raise RecipeNotFoundError(name)

        logger.info("Recipe deleted", recipe=name, user_id=str(user.id))
        await enqueue_recipe_removal(existing.id)

    async def _get_owned(self, user: UserRecord, name: str) -> RecipeWithIngredients:
        record = await self.recipes.get_by_name(name)
        if record is None:
            raise RecipeNotFoundError(name)
        if record.uploaded_by != user.id and not user.is_admin:
            logger.warning(
                "Recipe modification denied", recipe=name, user_id=str(user.id)
            )
            raise RecipePermissionError(name)
        return record

    async def _resolve_ingredients(self, data: RecipeCreate) -> list[RecipeIngredientData]:
        names = [item.name for item in data.ingredients]
        known = await self.ingredients.get_by_names(names)

        missing = [name for name in names if name not in known]
        if missing:
            raise UnknownIngredientsError(missing)

        return [
            RecipeIngredientData(
                ingredient_id=known[item.name].id,
                quantity=item.quantity,
                quantity_unit=item.quantity_unit,
            )
            for item in data.ingredients
        ]

    def _recipe_data(self, data: RecipeCreate) -> RecipeData:
        return RecipeData(
            name=data.name,
            description=data.description,
            prep_time=data.prep_time,
            cook_time=data.cook_time,
            difficulty=data.difficulty,
            cuisine=data.cuisine,
            meal_type=data.meal_type,
            steps=data.steps,
        )
