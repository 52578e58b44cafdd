"""Recipe service."""

from recipes_api.services.recipes.exceptions import (
    RecipeAlreadyExistsError,
    RecipeError,
    RecipeNotFoundError,
    RecipePermissionError,
    UnknownIngredientsError,
)
from recipes_api.services.recipes.service import RecipeService


__all__ = [
    "RecipeAlreadyExistsError",
    "RecipeError",
    "RecipeNotFoundError",
    "RecipePermissionError",
    "RecipeService",
    "UnknownIngredientsError",
]
