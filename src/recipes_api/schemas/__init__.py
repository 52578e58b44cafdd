"""Pydantic schemas for request/response validation."""

from recipes_api.schemas.auth import (
    ConfirmResponse,
    LoginRequest,
    LogoutResponse,
    RegisterRequest,
)
from recipes_api.schemas.base import (
    APIRequest,
    APIResponse,
    DownstreamRequest,
    DownstreamResponse,
)
from recipes_api.schemas.common import Page
from recipes_api.schemas.enums import (
    Difficulty,
    FoodCategory,
    HealthStatus,
    MealType,
    ReadinessStatus,
)
from recipes_api.schemas.health import (
    HealthCheckItem,
    LivenessResponse,
    ReadinessResponse,
)
from recipes_api.schemas.ingredient import IngredientCreate, IngredientResponse
from recipes_api.schemas.recipe import (
    MyRecipe,
    RecipeCreate,
    RecipeDetail,
    RecipeIngredientInput,
    RecipeIngredientResponse,
    RecipeSummary,
    Uploader,
)
from recipes_api.schemas.search import SearchQuery, SearchResponse, SearchResult
from recipes_api.schemas.user import PublicProfile, UserResponse, UserUpdate


__all__ = [
    "APIRequest",
    "APIResponse",
    "ConfirmResponse",
    "Difficulty",
    "DownstreamRequest",
    "DownstreamResponse",
    "FoodCategory",
    "HealthCheckItem",
    "HealthStatus",
    "IngredientCreate",
    "IngredientResponse",
    "LivenessResponse",
    "LoginRequest",
    "LogoutResponse",
    "MealType",
    "MyRecipe",
    "Page",
    "PublicProfile",
    "ReadinessResponse",
    "ReadinessStatus",
    "RecipeCreate",
    "RecipeDetail",
    "RecipeIngredientInput",
    "RecipeIngredientResponse",
    "RecipeSummary",
    "RegisterRequest",
    "SearchQuery",
    "SearchResponse",
    "SearchResult",
    "Uploader",
    "UserResponse",
    "UserUpdate",
]
