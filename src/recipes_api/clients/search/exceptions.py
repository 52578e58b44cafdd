"""Search service client exceptions.

The endpoint layer turns all of these into 503 responses; the indexing
jobs let them propagate so arq retries the job.
"""

from __future__ import annotations


class SearchError(Exception):
    """Base exception for search client errors."""


class SearchUnavailableError(SearchError):
    """The search service could not be reached."""


class SearchTimeoutError(SearchUnavailableError):
    pass


class SearchResponseError(SearchError):
    """The search service answered with an error status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(message)
