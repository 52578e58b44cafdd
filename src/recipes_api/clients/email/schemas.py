"""Email API payloads."""

from __future__ import annotations

from pydantic import Field

from recipes_api.schemas.base import DownstreamRequest


class SendEmailRequest(DownstreamRequest):
    """Body of ``POST /email``; the provider expects PascalCase keys."""

    sender: str = Field(..., alias="From")
    to: str = Field(..., alias="To")
    subject: str = Field(..., alias="Subject")
    html_body: str = Field(..., alias="HtmlBody")
    text_body: str = Field(..., alias="TextBody")
