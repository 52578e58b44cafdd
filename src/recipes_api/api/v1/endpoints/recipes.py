"""Recipe endpoints.

Recipes are addressed by their unique name, matching the frontend's
``/r/{name}`` pages.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from recipes_api.api.dependencies import get_recipe_service
from recipes_api.auth.dependencies import CurrentUser  # noqa: TC001
from recipes_api.core.exceptions import (
    ConflictException,
    ErrorDetail,
    ForbiddenException,
    NotFoundException,
    UnprocessableException,
)
from recipes_api.observability.logging import get_logger
from recipes_api.schemas.common import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Page
from recipes_api.schemas.recipe import MyRecipe, RecipeCreate, RecipeDetail, RecipeSummary
from recipes_api.services.recipes.exceptions import (
    RecipeAlreadyExistsError,
    RecipeNotFoundError,
    RecipePermissionError,
    UnknownIngredientsError,
)
from recipes_api.services.recipes.service import RecipeService


logger = get_logger(__name__)

router = APIRouter(prefix="/r", tags=["Recipes"])


def _unknown_ingredients(e: UnknownIngredientsError) -> UnprocessableException:
    return UnprocessableException(
        str(e),
        details=[
            ErrorDetail(
                code="UNKNOWN_INGREDIENT",
                message=f"Ingredient '{name}' does not exist",
                field="ingredients",
            )
            for name in e.names
        ],
    )


@router.get("", response_model=Page[RecipeSummary], summary="List recipes")
async def list_recipes(
    recipe_service: Annotated[RecipeService, Depends(get_recipe_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
) -> Page[RecipeSummary]:
    return await recipe_service.list_recipes(page=page, page_size=page_size)


@router.get(
    "/action/my-recipes",
    response_model=list[MyRecipe],
    summary="Recipes uploaded by the current user",
)
async def my_recipes(
    user: CurrentUser,
    recipe_service: Annotated[RecipeService, Depends(get_recipe_service)],
) -> list[MyRecipe]:
    return await recipe_service.my_recipes(user)


@router.get(
    "/{name}",
    response_model=RecipeDetail,
    summary="Get a recipe",
    responses={404: {"description": "Recipe not found"}},
)
async def get_recipe(
    name: str,
    recipe_service: Annotated[RecipeService, Depends(get_recipe_service)],
) -> RecipeDetail:
    try:
        return await recipe_service.get_recipe(name)
    except RecipeNotFoundError as e:
        raise NotFoundException("Recipe", name) from e


@router.post(
    "",
    response_model=RecipeDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Add a recipe",
    responses={
        401: {"description": "Not logged in"},
        409: {"description": "A recipe with this name exists"},
        422: {"description": "Invalid fields or unknown ingredients"},
    },
)
async def create_recipe(
    body: RecipeCreate,
    user: CurrentUser,
    recipe_service: Annotated[RecipeService, Depends(get_recipe_service)],
) -> RecipeDetail:
    try:
        recipe = await recipe_service.create_recipe(user, body)
    except UnknownIngredientsError as e:
        raise _unknown_ingredients(e) from e
    except RecipeAlreadyExistsError as e:
        raise ConflictException(str(e)) from e

    logger.info("Recipe added", recipe=recipe.name, user_id=str(user.id))
    return recipe


@router.put(
    "/{name}",
    response_model=RecipeDetail,
    summary="Replace a recipe",
    responses={
        403: {"description": "Not the uploader"},
        404: {"description": "Recipe not found"},
        409: {"description": "New name is taken"},
    },
)
async def update_recipe(
    name: str,
    body: RecipeCreate,
    user: CurrentUser,
    recipe_service: Annotated[RecipeService, Depends(get_recipe_service)],
) -> RecipeDetail:
    try:
        return await recipe_service.update_recipe(user, name, body)
    except RecipeNotFoundError as e:
        raise NotFoundException("Recipe", name) from e
    except RecipePermissionError as e:
        raise ForbiddenException(str(e)) from e
    except UnknownIngredientsError as e:
        raise _unknown_ingredients(e) from e
    except RecipeAlreadyExistsError as e:
        raise ConflictException(str(e)) from e


@router.delete(
    "/{name}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a recipe",
    responses={
        403: {"description": "Not the uploader"},
        404: {"description": "Recipe not found"},
    },
)
async def delete_recipe(
    name: str,
    user: CurrentUser,
    recipe_service: Annotated[RecipeService, Depends(get_recipe_service)],
) -> Response:
    try:
        await recipe_service.delete_recipe(user, name)
    except RecipeNotFoundError as e:
        raise NotFoundException("Recipe", name) from e
    except RecipePermissionError as e:
        raise ForbiddenException(str(e)) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
