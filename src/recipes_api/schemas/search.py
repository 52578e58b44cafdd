"""Search endpoint schemas."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from recipes_api.schemas.base import APIResponse, DownstreamRequest, DownstreamResponse


class SearchQuery(DownstreamRequest):
    """Body posted to ``/indexes/{index}/search``."""

    q: str
    limit: int
    offset: int


class SearchResult(DownstreamResponse):
    """Relevant part of a search service response."""

    hits: list[dict[str, Any]] = Field(default_factory=list)
    limit: int = 0
    offset: int = 0
    estimated_total_hits: int | None = Field(default=None, alias="estimatedTotalHits")


class SearchResponse(APIResponse):
    query: str
    hits: list[dict[str, Any]]
    limit: int
    offset: int
    estimated_total_hits: int | None = None
