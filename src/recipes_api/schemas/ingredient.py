"""Ingredient schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from recipes_api.schemas.base import APIRequest, APIResponse
from recipes_api.schemas.common import PATH_SAFE_NAME_PATTERN
from recipes_api.schemas.enums import FoodCategory


class IngredientCreate(APIRequest):
    """Body of ``POST /i``."""

    name: str = Field(..., min_length=1, max_length=100, pattern=PATH_SAFE_NAME_PATTERN)
    calories_per_100g: float = Field(..., ge=0)
    category: list[FoodCategory] = Field(..., min_length=1)
    g_per_piece: float | None = Field(default=None, gt=0)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return value.lower()

    @field_validator("category")
    @classmethod
    def dedupe_categories(cls, value: list[FoodCategory]) -> list[FoodCategory]:
        return list(dict.fromkeys(value))


class IngredientResponse(APIResponse):
    id: UUID
    name: str
    calories_per_100g: float
    category: list[FoodCategory]
    g_per_piece: float | None = None
    created_at: datetime
