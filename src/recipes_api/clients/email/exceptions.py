"""Email client exceptions."""

from __future__ import annotations


class EmailError(Exception):
    """Base exception for email client errors."""


class EmailDeliveryError(EmailError):
    """The email API could not be reached or refused the message."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
