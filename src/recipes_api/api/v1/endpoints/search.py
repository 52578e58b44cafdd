"""Full-text search over ingredients and recipes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from recipes_api.api.dependencies import get_search_client
from recipes_api.clients.search.client import SearchClient
from recipes_api.clients.search.exceptions import SearchError
from recipes_api.core.config import get_settings
from recipes_api.core.exceptions import ServiceUnavailableException
from recipes_api.observability.logging import get_logger
from recipes_api.schemas.search import SearchResponse


logger = get_logger(__name__)

router = APIRouter(prefix="/search", tags=["Search"])

MAX_SEARCH_LIMIT = 100


async def _search(
    client: SearchClient, index: str, q: str, limit: int | None, offset: int
) -> SearchResponse:
    limit = limit or get_settings().search.default_limit
    try:
        result = await client.search(index, q, limit=limit, offset=offset)
    except SearchError as e:
        logger.warning("Search failed", index=index, error=str(e))
        msg = "Search is temporarily unavailable"
        raise ServiceUnavailableException(msg) from e

    return SearchResponse(
        query=q,
        hits=result.hits,
        limit=limit,
        offset=offset,
        estimated_total_hits=result.estimated_total_hits,
    )


@router.get(
    "/ingredients",
    response_model=SearchResponse,
    summary="Search ingredients",
    responses={503: {"description": "Search service unavailable"}},
)
async def search_ingredients(
    client: Annotated[SearchClient, Depends(get_search_client)],
    q: Annotated[str, Query(max_length=200)] = "",
    limit: Annotated[int | None, Query(ge=1, le=MAX_SEARCH_LIMIT)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> SearchResponse:
    return await _search(client, get_settings().search.ingredients_index, q, limit, offset)


@router.get(
    "/recipes",
    response_model=SearchResponse,
    summary="Search recipes",
    responses={503: {"description": "Search service unavailable"}},
)
async def search_recipes(
    client: Annotated[SearchClient, Depends(get_search_client)],
    q: Annotated[str, Query(max_length=200)] = "",
    limit: Annotated[int | None, Query(ge=1, le=MAX_SEARCH_LIMIT)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> SearchResponse:
    return await _search(client, get_settings().search.recipes_index, q, limit, offset)
