"""Database repositories."""

from recipes_api.database.repositories.ingredients import (
    IngredientRecord,
    IngredientRepository,
)
from recipes_api.database.repositories.recipes import (
    RecipeData,
    RecipeIngredientData,
    RecipeIngredientRecord,
    RecipeOverview,
    RecipeRecord,
    RecipeRepository,
    RecipeWithIngredients,
)
from recipes_api.database.repositories.users import UserRecord, UserRepository


__all__ = [
    "IngredientRecord",
    "IngredientRepository",
    "RecipeData",
    "RecipeIngredientData",
    "RecipeIngredientRecord",
    "RecipeOverview",
    "RecipeRecord",
    "RecipeRepository",
    "RecipeWithIngredients",
    "UserRecord",
    "UserRepository",
]
