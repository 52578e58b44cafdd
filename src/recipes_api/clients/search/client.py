"""Meilisearch-compatible search service client.

Only the handful of REST endpoints the API needs are wrapped: document
upserts and deletes, index search, and the health probe.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import orjson

from recipes_api.clients.search.exceptions import (
    SearchResponseError,
    SearchTimeoutError,
    SearchUnavailableError,
)
from recipes_api.core.config import get_settings
from recipes_api.observability.logging import get_logger
from recipes_api.observability.metrics import SEARCH_REQUESTS
from recipes_api.schemas.search import SearchQuery, SearchResult


if TYPE_CHECKING:
    from recipes_api.core.config import Settings

logger = get_logger(__name__)


class SearchClient:
    """Async client for the hosted search service.

    Example:
        ```python
        client = SearchClient()
        await client.initialize()
        result = await client.search("ingredients", "tomato", limit=10)
        await client.shutdown()
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._http_client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._settings.search.url.rstrip("/")

    async def initialize(self) -> None:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._settings.MEILI_MASTER_KEY:
            headers["Authorization"] = f"Bearer {self._settings.MEILI_MASTER_KEY}"

        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self._settings.search.timeout),
            headers=headers,
        )
        logger.info("SearchClient initialized", base_url=self.base_url)

    async def shutdown(self) -> None:
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
        logger.debug("SearchClient shutdown")

    async def add_documents(
        self,
        index: str,
        documents: list[dict[str, Any]],
        *,
        primary_key: str = "id",
    ) -> dict[str, Any]:
        """Add or replace documents in an index.

        The service processes the batch asynchronously; the returned task
        summary only confirms it was enqueued.
        """
        response = await self._request(
            "POST",
            f"/indexes/{index}/documents",
            index=index,
            params={"primaryKey": primary_key},
            content=orjson.dumps(documents, default=str),
        )
        logger.info("Documents submitted for indexing", index=index, count=len(documents))
        return orjson.loads(response.content) if response.content else {}

    async def delete_document(self, index: str, document_id: str) -> None:
        await self._request(
            "DELETE", f"/indexes/{index}/documents/{document_id}", index=index
        )

    async def search(
        self,
        index: str,
        query: str,
        *,
        limit: int = 20,
        offset: int = 0,
    ) -> SearchResult:
        """Run a full-text query against an index.

        Raises:
            SearchUnavailableError: If the service is unreachable or times out.
            SearchResponseError: If the service returns an error status.
        """
        body = SearchQuery(q=query, limit=limit, offset=offset)
        response = await self._request(
            "POST",
            f"/indexes/{index}/search",
            index=index,
            content=orjson.dumps(body.model_dump()),
        )
        return SearchResult.model_validate(orjson.loads(response.content))

    async def health(self) -> bool:
        """Return True when the service reports itself available."""
        try:
            response = await self._request("GET", "/health", index="-")
        except (SearchUnavailableError, SearchResponseError):
            return False
        return orjson.loads(response.content).get("status") == "available"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        index: str,
        params: dict[str, Any] | None = None,
        content: bytes | None = None,
    ) -> httpx.Response:
        if not self._http_client:
            msg = "Client not initialized. Call initialize() first."
            raise RuntimeError(msg)

        try:
            response = await self._http_client.request(
                method, path, params=params, content=content
            )
        except httpx.TimeoutException as e:
            SEARCH_REQUESTS.labels(index=index, outcome="timeout").inc()
            logger.warning("Search request timed out", path=path)
            raise SearchTimeoutError(str(e)) from e
        except httpx.RequestError as e:
            SEARCH_REQUESTS.labels(index=index, outcome="unavailable").inc()
            logger.warning("Failed to connect to search service", error=str(e))
            msg = f"Failed to connect to search service: {e}"
            raise SearchUnavailableError(msg) from e

        if response.is_error:
            SEARCH_REQUESTS.labels(index=index, outcome="error").inc()
            raise self._response_error(response)

        SEARCH_REQUESTS.labels(index=index, outcome="ok").inc()
        return response

    def _response_error(self, response: httpx.Response) -> SearchResponseError:
        try:
            message = orjson.loads(response.content).get("message", "Unknown error")
        except orjson.JSONDecodeError:
            message = response.text or f"HTTP {response.status_code}"

        logger.warning(
            "Search service returned error",
            status_code=response.status_code,
            message=message,
        )
        return SearchResponseError(response.status_code, message)
