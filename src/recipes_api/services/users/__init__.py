"""User profile service."""

from recipes_api.services.users.exceptions import UserNotFoundError
from recipes_api.services.users.service import UserService, to_user_response


__all__ = ["UserNotFoundError", "UserService", "to_user_response"]
