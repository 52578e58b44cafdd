"""Authentication: password hashing, confirmation tokens and session users."""

from recipes_api.auth.dependencies import (
    CurrentUser,
    OptionalUser,
    SessionDep,
    get_current_user,
    get_current_user_optional,
    get_session,
    login_session,
)


__all__ = [
    "CurrentUser",
    "OptionalUser",
    "SessionDep",
    "get_current_user",
    "get_current_user_optional",
    "get_session",
    "login_session",
]
