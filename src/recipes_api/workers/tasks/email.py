"""Email delivery tasks."""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING, Any
from uuid import UUID

from recipes_api.auth.tokens import create_confirmation_token
from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from recipes_api.clients.email.client import EmailClient
    from recipes_api.core.config import Settings

logger = get_logger(__name__)

CONFIRMATION_SUBJECT = "Confirm your email address"


def confirmation_link(settings: Settings, user_id: UUID) -> str:
    token = create_confirmation_token(user_id)
    return f"{settings.email.confirmation_base_url}?token={token}"


async def send_confirmation_email(
    ctx: dict[str, Any],
    user_id: str,
    email: str,
    name: str,
) -> dict[str, Any]:
    """Email a freshly registered user their confirmation link.

    Delivery errors propagate so that arq retries the job.
    """
    settings: Settings = ctx["settings"]
    email_client: EmailClient = ctx["email_client"]

    link = confirmation_link(settings, UUID(user_id))
    html_body = (
        f"<p>Hi {escape(name)},</p>"
        f'<p>Welcome! Please <a href="{escape(link)}">confirm your email address</a>'
        " to finish setting up your account.</p>"
    )
    text_body = (
        f"Hi {name},\n\n"
        f"Welcome! Please confirm your email address by opening this link:\n{link}\n"
    )

    await email_client.send_email(email, CONFIRMATION_SUBJECT, html_body, text_body)
    logger.info("Confirmation email sent", user_id=user_id)
    return {"status": "sent", "user_id": user_id}
