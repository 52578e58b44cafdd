"""Search indexing tasks.

The search service is a read model: these tasks push the current contents
of the ``ingredients`` and ``recipes`` tables to their indexes. Documents
are upserted by id, so re-running a task is harmless.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from recipes_api.database.repositories.ingredients import IngredientRepository
from recipes_api.database.repositories.recipes import RecipeRepository
from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from recipes_api.clients.search.client import SearchClient
    from recipes_api.core.config import Settings
    from recipes_api.database.repositories.ingredients import IngredientRecord
    from recipes_api.database.repositories.recipes import RecipeWithIngredients

logger = get_logger(__name__)


def ingredient_document(record: IngredientRecord) -> dict[str, Any]:
    return {
        "id": str(record.id),
        "name": record.name,
        "calories_per_100g": record.calories_per_100g,
        "category": [str(c) for c in record.category],
        "g_per_piece": record.g_per_piece,
    }


def recipe_document(record: RecipeWithIngredients) -> dict[str, Any]:
    return {
        "id": str(record.id),
        "name": record.name,
        "description": record.description,
        "cuisine": record.cuisine,
        "meal_type": str(record.meal_type),
        "difficulty": str(record.difficulty),
        "prep_time": record.prep_time,
        "cook_time": record.cook_time,
        "uploader_name": record.uploader_name,
        "ingredients": [line.name for line in record.ingredients],
    }


async def index_ingredients(ctx: dict[str, Any]) -> dict[str, Any]:
    """Push every ingredient to the ingredients index."""
    settings: Settings = ctx["settings"]
    search_client: SearchClient = ctx["search_client"]
    repository = ctx.get("ingredient_repository") or IngredientRepository()

    records = await repository.list_all()
    logger.info("Started indexing ingredients", count=len(records))

    if records:
        await search_client.add_documents(
            settings.search.ingredients_index,
            [ingredient_document(record) for record in records],
        )

    logger.info("Finished indexing ingredients", count=len(records))
    return {"index": settings.search.ingredients_index, "documents": len(records)}


async def index_recipes(ctx: dict[str, Any]) -> dict[str, Any]:
    """Push every recipe, with its ingredient names, to the recipes index."""
    settings: Settings = ctx["settings"]
    search_client: SearchClient = ctx["search_client"]
    repository = ctx.get("recipe_repository") or RecipeRepository()

    records = await repository.list_all()
    logger.info("Started indexing recipes", count=len(records))

    if records:
        await search_client.add_documents(
            settings.search.recipes_index,
            [recipe_document(record) for record in records],
        )

    logger.info("Finished indexing recipes", count=len(records))
    return {"index": settings.search.recipes_index, "documents": len(records)}


async def reindex_search(ctx: dict[str, Any]) -> dict[str, Any]:
    """Hourly full reindex of both indexes."""
    ingredients = await index_ingredients(ctx)
    recipes = await index_recipes(ctx)
    return {"ingredients": ingredients["documents"], "recipes": recipes["documents"]}


async def remove_recipe_document(ctx: dict[str, Any], recipe_id: str) -> dict[str, Any]:
    """Drop a deleted recipe from the recipes index.

    Upserting reindexes never remove documents, so deletions are pushed
    explicitly.
    """
    settings: Settings = ctx["settings"]
    search_client: SearchClient = ctx["search_client"]

    await search_client.delete_document(settings.search.recipes_index, recipe_id)
    logger.info("Removed recipe from search index", recipe_id=recipe_id)
    return {"index": settings.search.recipes_index, "removed": recipe_id}
