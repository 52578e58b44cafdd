"""User profile endpoints."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from recipes_api.api.dependencies import get_user_service
from recipes_api.auth.dependencies import CurrentUser  # noqa: TC001
from recipes_api.core.exceptions import NotFoundException
from recipes_api.schemas.user import PublicProfile, UserResponse, UserUpdate
from recipes_api.services.users.exceptions import UserNotFoundError
from recipes_api.services.users.service import UserService, to_user_response


router = APIRouter(tags=["Users"])


@router.get("/me", response_model=UserResponse, summary="Current user")
async def get_me(user: CurrentUser) -> UserResponse:
    return to_user_response(user)


@router.patch("/me", response_model=UserResponse, summary="Update own profile")
async def update_me(
    update: UserUpdate,
    user: CurrentUser,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    try:
        return await user_service.update_profile(user, update)
    except UserNotFoundError as e:
        raise NotFoundException("User", user.id) from e


@router.get(
    "/u/{user_id}",
    response_model=PublicProfile,
    summary="Public profile",
    responses={404: {"description": "User not found"}},
)
async def get_profile(
    user_id: UUID,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> PublicProfile:
    try:
        return await user_service.public_profile(user_id)
    except UserNotFoundError as e:
        raise NotFoundException("User", user_id) from e
