"""Authentication service."""

from recipes_api.services.auth.exceptions import (
    AuthError,
    EmailAlreadyRegisteredError,
    InvalidConfirmationTokenError,
    InvalidCredentialsError,
)
from recipes_api.services.auth.service import AuthService


__all__ = [
    "AuthError",
    "AuthService",
    "EmailAlreadyRegisteredError",
    "InvalidConfirmationTokenError",
    "InvalidCredentialsError",
]
