"""Auth service exceptions."""

from __future__ import annotations


class AuthError(Exception):
    """Base exception for auth service errors."""


class EmailAlreadyRegisteredError(AuthError):
    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Email already registered: {email}")


class InvalidCredentialsError(AuthError):
    """Unknown email, wrong password, or an account without a password."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class InvalidConfirmationTokenError(AuthError):
    pass
