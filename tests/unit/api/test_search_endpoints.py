"""Unit tests for search endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import pytest

from recipes_api.clients.search.exceptions import SearchUnavailableError
from recipes_api.schemas.search import SearchResult


if TYPE_CHECKING:
    import httpx
    from fastapi import FastAPI


pytestmark = pytest.mark.unit


@pytest.fixture
def search_client(app: FastAPI) -> MagicMock:
    client = MagicMock()
    client.search = AsyncMock(
        return_value=SearchResult.model_validate(
            {
                "hits": [{"id": "1", "name": "tomato"}],
                "limit": 20,
                "offset": 0,
                "estimatedTotalHits": 1,
            }
        )
    )
    app.state.search_client = client
    return client


class TestSearchEndpoints:
    """Tests for /search."""

    async def test_search_ingredients(
        self, client: httpx.AsyncClient, search_client: MagicMock
    ) -> None:
        """Should query the ingredient index with the default limit."""
        response = await client.get("/search/ingredients", params={"q": "tom"})

        assert response.status_code == 200
        body = response.json()
        assert body["query"] == "tom"
        assert body["hits"] == [{"id": "1", "name": "tomato"}]
        assert body["estimated_total_hits"] == 1
        search_client.search.assert_awaited_once_with(
            "ingredients", "tom", limit=20, offset=0
        )

    async def test_search_recipes_with_paging(
        self, client: httpx.AsyncClient, search_client: MagicMock
    ) -> None:
        response = await client.get(
            "/search/recipes", params={"q": "soup", "limit": 5, "offset": 10}
        )

        assert response.status_code == 200
        search_client.search.assert_awaited_once_with("recipes", "soup", limit=5, offset=10)

    async def test_search_service_down(
        self, client: httpx.AsyncClient, search_client: MagicMock
    ) -> None:
        """Should answer 503 when the search service fails."""
        search_client.search.side_effect = SearchUnavailableError("down")

        response = await client.get("/search/recipes", params={"q": "soup"})

        assert response.status_code == 503
        assert response.json()["error"] == "SERVICE_UNAVAILABLE"

    async def test_search_client_not_initialized(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/search/recipes", params={"q": "soup"})

        assert response.status_code == 503

    async def test_limit_bounds(
        self, client: httpx.AsyncClient, search_client: MagicMock
    ) -> None:
        response = await client.get("/search/recipes", params={"limit": 0})

        assert response.status_code == 422
