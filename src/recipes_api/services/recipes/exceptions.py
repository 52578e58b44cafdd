"""Recipe service exceptions."""

from __future__ import annotations


class RecipeError(Exception):
    """Base exception for recipe service errors."""


class RecipeNotFoundError(RecipeError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Recipe not found: {name}")


class RecipeAlreadyExistsError(RecipeError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Recipe already exists: {name}")


class RecipePermissionError(RecipeError):
    """Only the uploader or an admin may change a recipe."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Not allowed to modify recipe: {name}")


class UnknownIngredientsError(RecipeError):
    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__(f"Unknown ingredients: {', '.join(names)}")
