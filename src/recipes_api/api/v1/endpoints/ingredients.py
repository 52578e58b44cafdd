"""Ingredient catalogue endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from recipes_api.api.dependencies import get_ingredient_service
from recipes_api.auth.dependencies import CurrentUser  # noqa: TC001
from recipes_api.core.exceptions import ConflictException, NotFoundException
from recipes_api.schemas.common import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Page
from recipes_api.schemas.ingredient import IngredientCreate, IngredientResponse
from recipes_api.services.ingredients.exceptions import (
    IngredientAlreadyExistsError,
    IngredientNotFoundError,
)
from recipes_api.services.ingredients.service import IngredientService


router = APIRouter(prefix="/i", tags=["Ingredients"])


@router.get("", response_model=Page[IngredientResponse], summary="List ingredients")
async def list_ingredients(
    ingredient_service: Annotated[IngredientService, Depends(get_ingredient_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
) -> Page[IngredientResponse]:
    return await ingredient_service.list_ingredients(page=page, page_size=page_size)


@router.get(
    "/{name}",
    response_model=IngredientResponse,
    summary="Get an ingredient",
    responses={404: {"description": "Ingredient not found"}},
)
async def get_ingredient(
    name: str,
    ingredient_service: Annotated[IngredientService, Depends(get_ingredient_service)],
) -> IngredientResponse:
    try:
        return await ingredient_service.get_ingredient(name)
    except IngredientNotFoundError as e:
        raise NotFoundException("Ingredient", name) from e


@router.post(
    "",
    response_model=IngredientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add an ingredient",
    responses={
        401: {"description": "Not logged in"},
        409: {"description": "An ingredient with this name exists"},
    },
)
async def create_ingredient(
    body: IngredientCreate,
    user: CurrentUser,
    ingredient_service: Annotated[IngredientService, Depends(get_ingredient_service)],
) -> IngredientResponse:
    try:
        return await ingredient_service.create_ingredient(user, body)
    except IngredientAlreadyExistsError as e:
        raise ConflictException(str(e)) from e
