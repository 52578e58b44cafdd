"""Authentication request/response schemas."""

from __future__ import annotations

from pydantic import EmailStr, Field

from recipes_api.schemas.base import APIRequest, APIResponse


MIN_PASSWORD_LENGTH = 8


class RegisterRequest(APIRequest):
    """New account with email and password."""

    email: EmailStr = Field(..., description="User email address")
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        max_length=128,
        description=f"Password (min {MIN_PASSWORD_LENGTH} characters)",
    )


class LoginRequest(APIRequest):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class ConfirmResponse(APIResponse):
    confirmed: bool = True


class LogoutResponse(APIResponse):
    logged_out: bool = True
