"""Ingredient service exceptions."""

from __future__ import annotations


class IngredientError(Exception):
    """Base exception for ingredient service errors."""


class IngredientNotFoundError(IngredientError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Ingredient not found: {name}")


class IngredientAlreadyExistsError(IngredientError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Ingredient already exists: {name}")
