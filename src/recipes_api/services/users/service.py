"""User profiles."""

from __future__ import annotations

from typing import TYPE_CHECKING

from recipes_api.database.repositories.users import UserRepository
from recipes_api.schemas.user import PublicProfile, UserResponse
from recipes_api.services.users.exceptions import UserNotFoundError


if TYPE_CHECKING:
    from uuid import UUID

    from recipes_api.database.repositories.users import UserRecord
    from recipes_api.schemas.user import UserUpdate


def to_user_response(user: UserRecord) -> UserResponse:
    return UserResponse.model_validate(user)


class UserService:
    def __init__(self, users: UserRepository | None = None) -> None:
        self.users = users or UserRepository()

    async def update_profile(self, user: UserRecord, update: UserUpdate) -> UserResponse:
        updated = await self.users.update_profile(
            user.id, name=update.name, bio=update.bio
        )
        if updated is None:
            raise UserNotFoundError(user.id)
        return to_user_response(updated)

    async def public_profile(self, user_id: UUID) -> PublicProfile:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        return PublicProfile(
            id=user.id,
            name=user.name,
            bio=user.bio,
            recipe_count=await self.users.count_recipes(user.id),
        )
