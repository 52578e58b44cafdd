"""PostgreSQL database layer: connection pool and repositories."""

from recipes_api.database.connection import (
    check_database_health,
    close_database_pool,
    get_database_pool,
    init_database_pool,
)
from recipes_api.database.exceptions import (
    DuplicateRecordError,
    MissingReferenceError,
    RepositoryError,
)


__all__ = [
    "DuplicateRecordError",
    "MissingReferenceError",
    "RepositoryError",
    "check_database_health",
    "close_database_pool",
    "get_database_pool",
    "init_database_pool",
]
