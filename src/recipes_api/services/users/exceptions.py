"""User service exceptions."""

from __future__ import annotations


class UserNotFoundError(Exception):
    def __init__(self, user_id: object) -> None:
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")
