"""User profile schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from recipes_api.schemas.base import APIRequest, APIResponse


class UserResponse(APIResponse):
    """The authenticated user's own view of their account."""

    id: UUID
    email: str
    name: str
    bio: str | None = None
    is_confirmed: bool
    is_admin: bool
    created_at: datetime


class UserUpdate(APIRequest):
    """Partial profile update; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    bio: str | None = Field(default=None, max_length=1000)


class PublicProfile(APIResponse):
    """What other users can see about an account."""

    id: UUID
    name: str
    bio: str | None = None
    recipe_count: int = Field(..., ge=0)
