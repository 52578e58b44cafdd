"""Schemas shared across resources."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import Field

from recipes_api.schemas.base import APIResponse


DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Recipes and ingredients are addressed as /r/{name} and /i/{name}
PATH_SAFE_NAME_PATTERN = r"^[^/]+$"

T = TypeVar("T")


class Page(APIResponse, Generic[T]):
    """One page of a listing."""

    items: list[T]
    total: int = Field(..., ge=0, description="Total number of items")
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1, le=MAX_PAGE_SIZE)
