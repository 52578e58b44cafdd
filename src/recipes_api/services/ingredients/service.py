"""Ingredient catalogue."""

from __future__ import annotations

from typing import TYPE_CHECKING

from recipes_api.database.exceptions import DuplicateRecordError
from recipes_api.database.repositories.ingredients import IngredientRepository
from recipes_api.observability.logging import get_logger
from recipes_api.schemas.common import Page
from recipes_api.schemas.ingredient import IngredientResponse
from recipes_api.services.ingredients.exceptions import (
    IngredientAlreadyExistsError,
    IngredientNotFoundError,
)
from recipes_api.workers.jobs import enqueue_ingredients_reindex


if TYPE_CHECKING:
    from recipes_api.database.repositories.users import UserRecord
    from recipes_api.schemas.ingredient import IngredientCreate

logger = get_logger(__name__)


class IngredientService:
    def __init__(self, ingredients: IngredientRepository | None = None) -> None:
        self.ingredients = ingredients or IngredientRepository()

    async def list_ingredients(
        self, *, page: int, page_size: int
    ) -> Page[IngredientResponse]:
        records, total = await self.ingredients.list_page(
            limit=page_size, offset=(page - 1) * page_size
        )
        return Page[IngredientResponse](
            items=[IngredientResponse.model_validate(r) for r in records],
            total=total,
            page=page,
            page_size=page_size,
        )

    async def get_ingredient(self, name: str) -> IngredientResponse:
        record = await self.ingredients.get_by_name(name)
        if record is None:
            raise IngredientNotFoundError(name)
        return IngredientResponse.model_validate(record)

    async def create_ingredient(
        self, user: UserRecord, data: IngredientCreate
    ) -> IngredientResponse:
        """Add an ingredient and schedule a reindex.

        Raises:
            IngredientAlreadyExistsError: If the name is taken.
        """
        try:
            record = await self.ingredients.create(
                name=data.name,
                calories_per_100g=data.calories_per_100g,
                category=data.category,
                g_per_piece=data.g_per_piece,
                uploaded_by=user.id,
            )
        except DuplicateRecordError as e:
            raise IngredientAlreadyExistsError(data.name) from e

        await enqueue_ingredients_reindex()
        return IngredientResponse.model_validate(record)
