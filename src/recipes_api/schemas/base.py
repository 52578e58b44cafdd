"""Base schema configuration for all Pydantic models.

Usage:
    - APIRequest: incoming request bodies
    - APIResponse: outgoing response bodies
    - DownstreamRequest: payloads sent to the search, email and OAuth services
    - DownstreamResponse: payloads received from those services

The frontend speaks snake_case, so unlike many of our services there is no
camelCase alias generator here.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class _BaseSchema(BaseModel):
    """Private base schema with common configuration.

    Do not use directly - inherit from one of the public subclasses.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
        str_strip_whitespace=True,
    )


class APIRequest(_BaseSchema):
    """Incoming request bodies; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")


class APIResponse(_BaseSchema):
    """Outgoing response bodies; only declared fields may be returned."""

    model_config = ConfigDict(extra="forbid", from_attributes=True)


class DownstreamRequest(_BaseSchema):
    """Requests sent to external services; never send undeclared fields."""

    model_config = ConfigDict(extra="forbid")


class DownstreamResponse(_BaseSchema):
    """Responses from external services; tolerate fields we don't know."""

    model_config = ConfigDict(extra="ignore")
