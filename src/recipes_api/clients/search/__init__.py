"""Search service client."""

from recipes_api.clients.search.client import SearchClient
from recipes_api.clients.search.exceptions import (
    SearchError,
    SearchResponseError,
    SearchTimeoutError,
    SearchUnavailableError,
)


__all__ = [
    "SearchClient",
    "SearchError",
    "SearchResponseError",
    "SearchTimeoutError",
    "SearchUnavailableError",
]
