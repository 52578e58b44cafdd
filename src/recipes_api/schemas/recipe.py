"""Recipe schemas.

``RecipeCreate`` is what the frontend's add-recipe form submits: recipe
metadata plus ingredients referenced by name.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from recipes_api.schemas.base import APIRequest, APIResponse
from recipes_api.schemas.common import PATH_SAFE_NAME_PATTERN
from recipes_api.schemas.enums import Difficulty, MealType


class RecipeIngredientInput(APIRequest):
    """An ingredient line in a submitted recipe."""

    name: str = Field(..., min_length=1, max_length=100)
    quantity: float = Field(..., gt=0)
    quantity_unit: str = Field(..., min_length=1, max_length=20)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return value.lower()


class RecipeCreate(APIRequest):
    """Body of ``POST /r`` and ``PUT /r/{name}``."""

    name: str = Field(..., min_length=1, max_length=200, pattern=PATH_SAFE_NAME_PATTERN)
    description: str = Field(default="", max_length=5000)
    prep_time: int = Field(..., ge=0, description="Minutes")
    cook_time: int = Field(..., ge=0, description="Minutes")
    difficulty: Difficulty
    cuisine: str = Field(..., min_length=1, max_length=50)
    meal_type: MealType
    steps: list[str] = Field(..., min_length=1)
    ingredients: list[RecipeIngredientInput] = Field(..., min_length=1)

    @field_validator("cuisine")
    @classmethod
    def normalize_cuisine(cls, value: str) -> str:
        return value.lower()

    @field_validator("steps")
    @classmethod
    def drop_blank_steps(cls, value: list[str]) -> list[str]:
        steps = [step.strip() for step in value if step.strip()]
        if not steps:
            msg = "at least one non-empty step is required"
            raise ValueError(msg)
        return steps

    @field_validator("ingredients")
    @classmethod
    def unique_ingredients(
        cls, value: list[RecipeIngredientInput]
    ) -> list[RecipeIngredientInput]:
        names = [item.name for item in value]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            msg = f"duplicate ingredients: {', '.join(duplicates)}"
            raise ValueError(msg)
        return value


class Uploader(APIResponse):
    id: UUID
    name: str


class RecipeIngredientResponse(APIResponse):
    name: str
    quantity: float
    quantity_unit: str
    calories_per_100g: float


class RecipeDetail(APIResponse):
    """Everything about a recipe, as shown on its page."""

    id: UUID
    name: str
    description: str
    prep_time: int
    cook_time: int
    difficulty: Difficulty
    cuisine: str
    meal_type: MealType
    steps: list[str]
    ingredients: list[RecipeIngredientResponse]
    uploaded_by: Uploader
    created_at: datetime
    updated_at: datetime


class RecipeSummary(APIResponse):
    """A recipe as shown in listings."""

    name: str
    description: str
    prep_time: int
    cook_time: int
    difficulty: Difficulty
    cuisine: str
    meal_type: MealType
    uploader_name: str


class MyRecipe(APIResponse):
    """Entry of ``GET /r/action/my-recipes``."""

    name: str
    description: str
    ingredient_count: int
