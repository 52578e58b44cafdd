"""Background task functions run by the arq worker."""

from recipes_api.workers.tasks.email import send_confirmation_email
from recipes_api.workers.tasks.search_index import (
    index_ingredients,
    index_recipes,
    reindex_search,
    remove_recipe_document,
)


__all__ = [
    "index_ingredients",
    "index_recipes",
    "reindex_search",
    "remove_recipe_document",
    "send_confirmation_email",
]
