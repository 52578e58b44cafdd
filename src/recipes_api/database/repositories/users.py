"""User account repository."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

import asyncpg
from pydantic import BaseModel

from recipes_api.database.connection import get_database_pool
from recipes_api.database.exceptions import DuplicateRecordError
from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from asyncpg import Pool, Record

logger = get_logger(__name__)


class UserRecord(BaseModel):
    """A row of the ``users`` table."""

    id: UUID
    email: str
    name: str
    password_hash: str | None
    oauth_id: str | None
    bio: str | None
    is_confirmed: bool
    is_admin: bool
    created_at: datetime
    updated_at: datetime


_USER_COLUMNS = """
    id, email, name, password_hash, oauth_id, bio,
    is_confirmed, is_admin, created_at, updated_at
"""


class UserRepository:
    """Data access for user accounts.

    Emails are stored lower-cased and compared case-insensitively.
    """

    def __init__(self, pool: Pool | None = None) -> None:
        self._pool = pool

    @property
    def pool(self) -> Pool:
        if self._pool is not None:
            return self._pool
        return get_database_pool()

    async def get_by_id(self, user_id: UUID) -> UserRecord | None:
        query = f"SELECT {_USER_COLUMNS} FROM users WHERE id = $1"
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, user_id)
        return self._row_to_user(row) if row else None

    async def get_by_email(self, email: str) -> UserRecord | None:
        query = f"SELECT {_USER_COLUMNS} FROM users WHERE email = LOWER($1)"
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, email)
        return self._row_to_user(row) if row else None

    async def get_by_oauth_id(self, oauth_id: str) -> UserRecord | None:
        query = f"SELECT {_USER_COLUMNS} FROM users WHERE oauth_id = $1"
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, oauth_id)
        return self._row_to_user(row) if row else None

    async def create(
        self,
        *,
        email: str,
        name: str,
        password_hash: str | None = None,
        oauth_id: str | None = None,
        is_confirmed: bool = False,
    ) -> UserRecord:
        """Insert a new account.

        Raises:
            DuplicateRecordError: If the email or OAuth id is taken.
        """
        query = f"""
            INSERT INTO users (email, name, password_hash, oauth_id, is_confirmed)
            VALUES (LOWER($1), $2, $3, $4, $5)
            RETURNING {_USER_COLUMNS}
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    query, email, name, password_hash, oauth_id, is_confirmed
                )
        except asyncpg.UniqueViolationError as e:
            if e.constraint_name == "users_oauth_id_key":
                raise DuplicateRecordError("User", "oauth_id", oauth_id or "") from e
            raise DuplicateRecordError("User", "email", email.lower()) from e

        logger.info("User created", user_id=str(row["id"]))
        return self._row_to_user(row)

    async def update_profile(
        self,
        user_id: UUID,
        *,
        name: str | None = None,
        bio: str | None = None,
    ) -> UserRecord | None:
        """Update name and/or bio; ``None`` leaves a field as it is."""
        query = f"""
            UPDATE users
            SET name = COALESCE($2, name),
                bio = COALESCE($3, bio),
                updated_at = NOW()
            WHERE id = $1
            RETURNING {_USER_COLUMNS}
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, user_id, name, bio)
        return self._row_to_user(row) if row else None

    async def confirm(self, user_id: UUID) -> bool:
        """Mark the email as confirmed. Returns False if the user is gone."""
        query = """
            UPDATE users SET is_confirmed = TRUE, updated_at = NOW()
            WHERE id = $1
        """
        async with self.pool.acquire() as conn:
            status = await conn.execute(query, user_id)
        return status == "UPDATE 1"

    async def link_oauth(
        self,
        user_id: UUID,
        oauth_id: str,
        *,
        revoke_password: bool = False,
    ) -> UserRecord | None:
        """Attach an OAuth identity to an existing account.

        Linking proves ownership of the email, so the account is confirmed.
        With ``revoke_password`` the stored password hash is cleared in the
        same statement. Returns None if the user is gone or already linked
        to a different identity.
        """
        query = f"""
            UPDATE users
            SET oauth_id = $2,
                is_confirmed = TRUE,
                password_hash = CASE WHEN $3 THEN NULL ELSE password_hash END,
                updated_at = NOW()
            WHERE id = $1 AND (oauth_id IS NULL OR oauth_id = $2)
            RETURNING {_USER_COLUMNS}
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(query, user_id, oauth_id, revoke_password)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateRecordError("User", "oauth_id", oauth_id) from e
        return self._row_to_user(row) if row else None

    async def count_recipes(self, user_id: UUID) -> int:
        query = "SELECT COUNT(*) FROM recipes WHERE uploaded_by = $1"
        async with self.pool.acquire() as conn:
            count = await conn.fetchval(query, user_id)
        return int(count or 0)

    def _row_to_user(self, row: Record) -> UserRecord:
        return UserRecord(
            id=row["id"],
            email=row["email"],
            name=row["name"],
            password_hash=row["password_hash"],
            oauth_id=row["oauth_id"],
            bio=row["bio"],
            is_confirmed=row["is_confirmed"],
            is_admin=row["is_admin"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
