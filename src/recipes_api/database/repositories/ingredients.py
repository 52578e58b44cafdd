"""Ingredient repository."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

import asyncpg
from pydantic import BaseModel

from recipes_api.database.connection import get_database_pool
from recipes_api.database.exceptions import DuplicateRecordError
from recipes_api.observability.logging import get_logger
from recipes_api.schemas.enums import FoodCategory


if TYPE_CHECKING:
    from asyncpg import Pool, Record

logger = get_logger(__name__)


class IngredientRecord(BaseModel):
    """A row of the ``ingredients`` table."""

    id: UUID
    name: str
    calories_per_100g: float
    category: list[FoodCategory]
    g_per_piece: float | None
    uploaded_by: UUID | None
    created_at: datetime


_INGREDIENT_COLUMNS = """
    id, name, calories_per_100g, category, g_per_piece, uploaded_by, created_at
"""


class IngredientRepository:
    """Data access for the shared ingredient catalogue."""

    def __init__(self, pool: Pool | None = None) -> None:
        self._pool = pool

    @property
    def pool(self) -> Pool:
        if self._pool is not None:
            return self._pool
        return get_database_pool()

    async def get_by_name(self, name: str) -> IngredientRecord | None:
        query = f"SELECT {_INGREDIENT_COLUMNS} FROM ingredients WHERE name = LOWER($1)"
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, name)
        return self._row_to_ingredient(row) if row else None

    async def get_by_names(self, names: list[str]) -> dict[str, IngredientRecord]:
        """Look up several ingredients at once, keyed by name.

        Names that don't exist are simply absent from the result.
        """
        if not names:
            return {}

        query = f"""
            SELECT {_INGREDIENT_COLUMNS} FROM ingredients
            WHERE name = ANY(SELECT LOWER(unnest($1::text[])))
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, names)
        return {row["name"]: self._row_to_ingredient(row) for row in rows}

    async def list_page(
        self, *, limit: int, offset: int
    ) -> tuple[list[IngredientRecord], int]:
        """Return one page ordered by name, plus the total count."""
        query = f"""
            SELECT {_INGREDIENT_COLUMNS} FROM ingredients
            ORDER BY name
            LIMIT $1 OFFSET $2
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, limit, offset)
            total = await conn.fetchval("SELECT COUNT(*) FROM ingredients")
        return [self._row_to_ingredient(row) for row in rows], int(total or 0)

    async def list_all(self) -> list[IngredientRecord]:
        """Every ingredient, for pushing to the search index."""
        query = f"SELECT {_INGREDIENT_COLUMNS} FROM ingredients ORDER BY name"
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query)
        return [self._row_to_ingredient(row) for row in rows]

    async def create(
        self,
        *,
        name: str,
        calories_per_100g: float,
        category: list[FoodCategory],
        g_per_piece: float | None,
        uploaded_by: UUID | None,
    ) -> IngredientRecord:
        """Insert an ingredient.

        Raises:
            DuplicateRecordError: If an ingredient with that name exists.
        """
        query = f"""
            INSERT INTO ingredients (name, calories_per_100g, category, g_per_piece, uploaded_by)
            VALUES (LOWER($1), $2, $3::text[], $4, $5)
            RETURNING {_INGREDIENT_COLUMNS}
        """  # noqa: E501
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    query,
                    name,
                    calories_per_100g,
                    [str(c) for c in category],
                    g_per_piece,
                    uploaded_by,
                )
        except asyncpg.UniqueViolationError as e:
            raise DuplicateRecordError("Ingredient", "name", name.lower()) from e

        logger.info("Ingredient created", ingredient=row["name"])
        return self._row_to_ingredient(row)

    def _row_to_ingredient(self, row: Record) -> IngredientRecord:
        return IngredientRecord(
            id=row["id"],
            name=row["name"],
            calories_per_100g=float(row["calories_per_100g"]),
            category=[FoodCategory(c) for c in row["category"] or []],
            g_per_piece=(
                float(row["g_per_piece"]) if row["g_per_piece"] is not None else None
            ),
            uploaded_by=row["uploaded_by"],
            created_at=row["created_at"],
        )
