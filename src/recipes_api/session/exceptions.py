"""Session storage errors."""

from __future__ import annotations


class SessionStoreError(Exception):
    """The session backend could not be reached or returned garbage."""
