"""Persistence errors that callers are expected to handle."""

from __future__ import annotations


class RepositoryError(Exception):
    """Base class for data-access errors."""


class DuplicateRecordError(RepositoryError):
    """A unique constraint rejected the write."""

    def __init__(self, entity: str, field: str, value: str) -> None:
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(f"{entity} with {field} '{value}' already exists")


class MissingReferenceError(RepositoryError):
    """A foreign key points at a row that does not exist."""

    def __init__(self, entity: str, detail: str | None = None) -> None:
        self.entity = entity
        super().__init__(detail or f"Referenced {entity} does not exist")
