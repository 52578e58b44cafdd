"""Health and readiness probe schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from recipes_api.schemas.base import APIResponse
from recipes_api.schemas.enums import HealthStatus, ReadinessStatus


class HealthCheckItem(APIResponse):
    """Status of one dependency."""

    status: HealthStatus
    message: str
    response_time_ms: float | None = None


class LivenessResponse(APIResponse):
    status: str = "alive"


class ReadinessResponse(APIResponse):
    """Whether the service can take traffic, with per-dependency details."""

    status: ReadinessStatus
    timestamp: datetime
    version: str
    checks: dict[str, HealthCheckItem] = Field(default_factory=dict)
