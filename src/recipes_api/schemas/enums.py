"""Enumeration types shared by the API schemas and the repositories."""

from __future__ import annotations

from enum import StrEnum


class FoodCategory(StrEnum):
    """Categories an ingredient can belong to (an ingredient may have several)."""

    VEGETABLE = "vegetable"
    FRUIT = "fruit"
    GRAIN = "grain"
    LEGUME = "legume"
    NUT = "nut"
    DAIRY = "dairy"
    EGG = "egg"
    MEAT = "meat"
    POULTRY = "poultry"
    SEAFOOD = "seafood"
    SPICE = "spice"
    OIL = "oil"
    SWEETENER = "sweetener"
    BEVERAGE = "beverage"
    OTHER = "other"


class Difficulty(StrEnum):
    """Recipe difficulty levels."""

    EASY = "easy"
    MODERATE = "moderate"
    HARD = "hard"


class MealType(StrEnum):
    """When a recipe is typically eaten."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    DESSERT = "dessert"
    OTHER = "other"


class HealthStatus(StrEnum):
    """Overall health status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ReadinessStatus(StrEnum):
    """Readiness probe status values."""

    READY = "ready"
    NOT_READY = "not_ready"
