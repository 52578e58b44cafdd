"""Recipe repository.

Recipes and their ingredient lines are always written together inside one
transaction, so a recipe is never visible with a partial ingredient list.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

import asyncpg
from pydantic import BaseModel

from recipes_api.database.connection import get_database_pool
from recipes_api.database.exceptions import (
    DuplicateRecordError,
    MissingReferenceError,
    RepositoryError,
)
from recipes_api.observability.logging import get_logger
from recipes_api.schemas.enums import Difficulty, MealType


if TYPE_CHECKING:
    from asyncpg import Connection, Pool, Record

logger = get_logger(__name__)


# =============================================================================
# Data Transfer Objects
# =============================================================================


class RecipeData(BaseModel):
    """Recipe columns supplied on create and update."""

    name: str
    description: str
    prep_time: int
    cook_time: int
    difficulty: Difficulty
    cuisine: str
    meal_type: MealType
    steps: list[str]


class RecipeIngredientData(BaseModel):
    """An ingredient line to write."""

    ingredient_id: UUID
    quantity: float
    quantity_unit: str


class RecipeRecord(RecipeData):
    """A recipe row joined with its uploader's name."""

    id: UUID
    uploaded_by: UUID
    uploader_name: str
    created_at: datetime
    updated_at: datetime


class RecipeIngredientRecord(BaseModel):
    ingredient_id: UUID
    name: str
    quantity: float
    quantity_unit: str
    calories_per_100g: float


class RecipeWithIngredients(RecipeRecord):
    ingredients: list[RecipeIngredientRecord]


class RecipeOverview(BaseModel):
    """Compact view used for a user's own recipe list."""

    name: str
    description: str
    ingredient_count: int


# =============================================================================
# Repository
# =============================================================================


_RECIPE_QUERY = """
    SELECT
        r.id, r.uploaded_by, u.name AS uploader_name, r.name, r.description,
        r.prep_time, r.cook_time, r.difficulty, r.cuisine, r.meal_type,
        r.steps, r.created_at, r.updated_at
    FROM recipes r
    JOIN users u ON u.id = r.uploaded_by
"""

_INGREDIENTS_QUERY = """
    SELECT
        ri.recipe_id, ri.ingredient_id, i.name, ri.quantity, ri.quantity_unit,
        i.calories_per_100g
    FROM recipe_ingredients ri
    JOIN ingredients i ON i.id = ri.ingredient_id
    WHERE ri.recipe_id = ANY($1::uuid[])
    ORDER BY i.name
"""


class RecipeRepository:
    """Data access for recipes and their ingredient lines."""

    def __init__(self, pool: Pool | None = None) -> None:
        self._pool = pool

    @property
    def pool(self) -> Pool:
        if self._pool is not None:
            return self._pool
        return get_database_pool()

    async def get_by_name(self, name: str) -> RecipeWithIngredients | None:
        async with self.pool.acquire() as conn:
            return await self._fetch_one(conn, "r.name = $1", name)

    async def list_page(
        self, *, limit: int, offset: int
    ) -> tuple[list[RecipeRecord], int]:
        """Newest recipes first, plus the total count."""
        query = f"{_RECIPE_QUERY} ORDER BY r.created_at DESC, r.name LIMIT $1 OFFSET $2"
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, limit, offset)
            total = await conn.fetchval("SELECT COUNT(*) FROM recipes")
        return [self._row_to_recipe(row) for row in rows], int(total or 0)

    async def list_by_user(self, user_id: UUID) -> list[RecipeOverview]:
        query = """
            SELECT r.name, r.description, COUNT(ri.ingredient_id) AS ingredient_count
            FROM recipes r
            LEFT JOIN recipe_ingredients ri ON ri.recipe_id = r.id
            WHERE r.uploaded_by = $1
            GROUP BY r.id
            ORDER BY r.created_at DESC
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, user_id)
        return [
            RecipeOverview(
                name=row["name"],
                description=row["description"],
                ingredient_count=row["ingredient_count"],
            )
            for row in rows
        ]

    async def list_all(self) -> list[RecipeWithIngredients]:
        """Every recipe with its ingredients, for the search index."""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(f"{_RECIPE_QUERY} ORDER BY r.name")
            recipes = [self._row_to_recipe(row) for row in rows]
            lines = await self._fetch_ingredients(conn, [r.id for r in recipes])
        return [
            RecipeWithIngredients(
                **recipe.model_dump(), ingredients=lines.get(recipe.id, [])
            )
            for recipe in recipes
        ]

    async def create(
        self,
        uploaded_by: UUID,
        data: RecipeData,
        ingredients: list[RecipeIngredientData],
    ) -> RecipeWithIngredients:
        """Insert a recipe with its ingredient lines.

        Raises:
            DuplicateRecordError: If the recipe name is taken.
            MissingReferenceError: If an ingredient disappeared meanwhile.
        """
        query = """
            INSERT INTO recipes (
                uploaded_by, name, description, prep_time, cook_time,
                difficulty, cuisine, meal_type, steps
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
            RETURNING id
        """
        async with self.pool.acquire() as conn:
            try:
                async with conn.transaction():
                    recipe_id = await conn.fetchval(
                        query,
                        uploaded_by,
                        data.name,
                        data.description,
                        data.prep_time,
                        data.cook_time,
                        str(data.difficulty),
                        data.cuisine,
                        str(data.meal_type),
                        data.steps,
                    )
                    await self._insert_ingredients(conn, recipe_id, ingredients)
            except asyncpg.UniqueViolationError as e:
                raise DuplicateRecordError("Recipe", "name", data.name) from e
            except asyncpg.ForeignKeyViolationError as e:
                raise MissingReferenceError("Ingredient") from e

            recipe = await self._fetch_one(conn, "r.id = $1", recipe_id)

        if recipe is None:
            msg = f"Recipe {recipe_id} missing right after insert"
            raise RepositoryError(msg)

        logger.info("Recipe created", recipe=data.name, recipe_id=str(recipe_id))
        return recipe

    async def update(
        self,
        recipe_id: UUID,
        data: RecipeData,
        ingredients: list[RecipeIngredientData],
    ) -> RecipeWithIngredients | None:
        """Replace a recipe's fields and ingredient list.

        Returns None if the recipe no longer exists.
        """
        query = """
            UPDATE recipes
            SET name = $2, description = $3, prep_time = $4, cook_time = $5,
                difficulty = $6, cuisine = $7, meal_type = $8, steps = $9,
                updated_at = NOW()
            WHERE id = $1
        """
        async with self.pool.acquire() as conn:
            try:
                async with conn.transaction():
                    status = await conn.execute(
                        query,
                        recipe_id,
                        data.name,
                        data.description,
                        data.prep_time,
                        data.cook_time,
                        str(data.difficulty),
                        data.cuisine,
                        str(data.meal_type),
                        data.steps,
                    )
                    if status != "UPDATE 1":
                        return None
                    await conn.execute(
                        "DELETE FROM recipe_ingredients WHERE recipe_id = $1", recipe_id
                    )
                    await self._insert_ingredients(conn, recipe_id, ingredients)
            except asyncpg.UniqueViolationError as e:
                raise DuplicateRecordError("Recipe", "name", data.name) from e
            except asyncpg.ForeignKeyViolationError as e:
                raise MissingReferenceError("Ingredient") from e

            return await self._fetch_one(conn, "r.id = $1", recipe_id)

    async def delete(self, recipe_id: UUID) -> bool:
        """Delete a recipe; its ingredient lines go with it (ON DELETE CASCADE)."""
        async with self.pool.acquire() as conn:
            status = await conn.execute("DELETE FROM recipes WHERE id = $1", recipe_id)
        return status == "DELETE 1"

    async def _insert_ingredients(
        self,
        conn: Connection,
        recipe_id: UUID,
        ingredients: list[RecipeIngredientData],
    ) -> None:
        await conn.executemany(
            """
            INSERT INTO recipe_ingredients (recipe_id, ingredient_id, quantity, quantity_unit)
            VALUES ($1, $2, $3, $4)
            """,  # noqa: E501
            [
                (recipe_id, line.ingredient_id, line.quantity, line.quantity_unit)
                for line in ingredients
            ],
        )

    async def _fetch_one(
        self, conn: Connection, condition: str, value: object
    ) -> RecipeWithIngredients | None:
        row = await conn.fetchrow(f"{_RECIPE_QUERY} WHERE {condition}", value)
        if row is None:
            return None
        recipe = self._row_to_recipe(row)
        lines = await self._fetch_ingredients(conn, [recipe.id])
        return RecipeWithIngredients(
            **recipe.model_dump(), ingredients=lines.get(recipe.id, [])
        )

    async def _fetch_ingredients(
        self, conn: Connection, recipe_ids: list[UUID]
    ) -> dict[UUID, list[RecipeIngredientRecord]]:
        if not recipe_ids:
            return {}
        rows = await conn.fetch(_INGREDIENTS_QUERY, recipe_ids)

        result: dict[UUID, list[RecipeIngredientRecord]] = {}
        for row in rows:
            result.setdefault(row["recipe_id"], []).append(
                RecipeIngredientRecord(
                    ingredient_id=row["ingredient_id"],
                    name=row["name"],
                    quantity=float(row["quantity"]),
                    quantity_unit=row["quantity_unit"],
                    calories_per_100g=float(row["calories_per_100g"]),
                )
            )
        return result

    def _row_to_recipe(self, row: Record) -> RecipeRecord:
        return RecipeRecord(
            id=row["id"],
            uploaded_by=row["uploaded_by"],
            uploader_name=row["uploader_name"],
            name=row["name"],
            description=row["description"],
            prep_time=row["prep_time"],
            cook_time=row["cook_time"],
            difficulty=Difficulty(row["difficulty"]),
            cuisine=row["cuisine"],
            meal_type=MealType(row["meal_type"]),
            steps=list(row["steps"] or []),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
