"""Ingredient service."""

from recipes_api.services.ingredients.exceptions import (
    IngredientAlreadyExistsError,
    IngredientError,
    IngredientNotFoundError,
)
from recipes_api.services.ingredients.service import IngredientService


__all__ = [
    "IngredientAlreadyExistsError",
    "IngredientError",
    "IngredientNotFoundError",
    "IngredientService",
]
