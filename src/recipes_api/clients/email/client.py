"""Transactional email API client (Postmark-compatible)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import orjson

from recipes_api.clients.email.exceptions import EmailDeliveryError
from recipes_api.clients.email.schemas import SendEmailRequest
from recipes_api.core.config import get_settings
from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from pydantic import EmailStr

    from recipes_api.core.config import Settings

logger = get_logger(__name__)


class EmailClient:
    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._http_client: httpx.AsyncClient | None = None

    @property
    def sender(self) -> str:
        return self._settings.email.sender

    async def initialize(self) -> None:
        self._http_client = httpx.AsyncClient(
            base_url=self._settings.email.base_url.rstrip("/"),
            timeout=httpx.Timeout(self._settings.email.timeout),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "X-Postmark-Server-Token": self._settings.EMAIL_AUTHORIZATION_TOKEN,
            },
        )
        logger.info("EmailClient initialized", base_url=self._settings.email.base_url)

    async def shutdown(self) -> None:
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
        logger.debug("EmailClient shutdown")

    async def send_email(
        self,
        recipient: EmailStr | str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> None:
        """Send one message.

        Raises:
            EmailDeliveryError: If the API is unreachable or rejects the message.
        """
        if not self._http_client:
            msg = "Client not initialized. Call initialize() first."
            raise RuntimeError(msg)

        request = SendEmailRequest(
            sender=self.sender,
            to=str(recipient),
            subject=subject,
            html_body=html_body,
            text_body=text_body,
        )

        try:
            response = await self._http_client.post(
                "/email",
                content=orjson.dumps(request.model_dump(by_alias=True)),
            )
        except httpx.RequestError as e:
            logger.warning("Failed to reach email API", error=str(e))
            msg = f"Failed to reach email API: {e}"
            raise EmailDeliveryError(msg) from e

        if response.is_error:
            logger.warning(
                "Email API rejected message",
                status_code=response.status_code,
                body=response.text[:500],
            )
            msg = f"Email API returned {response.status_code}"
            raise EmailDeliveryError(msg, status_code=response.status_code)

        logger.info("Email sent", subject=subject)
