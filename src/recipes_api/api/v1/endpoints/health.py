"""Liveness and readiness probes."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import ORJSONResponse

from recipes_api.cache.redis import check_redis_health
from recipes_api.core.config import Settings, get_settings
from recipes_api.database.connection import check_database_health
from recipes_api.schemas.enums import HealthStatus, ReadinessStatus
from recipes_api.schemas.health import (
    HealthCheckItem,
    LivenessResponse,
    ReadinessResponse,
)


router = APIRouter(tags=["Health"])


async def _timed_check(check: Callable[[], Awaitable[bool]], name: str) -> HealthCheckItem:
    started = time.perf_counter()
    healthy = await check()
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    return HealthCheckItem(
        status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
        message=f"{name} {'reachable' if healthy else 'unreachable'}",
        response_time_ms=elapsed_ms,
    )


@router.get("/health", response_model=LivenessResponse, summary="Liveness probe")
async def health_check() -> LivenessResponse:
    """The process is up; dependencies are not checked."""
    return LivenessResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    responses={503: {"description": "Database or Redis unavailable"}},
)
async def readiness_check(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> ORJSONResponse:
    """Check database, Redis and search.

    Search is reported but does not affect readiness: only the search
    endpoints depend on it.
    """
    checks = {
        "database": await _timed_check(check_database_health, "Database"),
        "redis": await _timed_check(check_redis_health, "Redis"),
    }

    search_client = getattr(request.app.state, "search_client", None)
    if search_client is not None:
        search = await _timed_check(search_client.health, "Search")
        if search.status == HealthStatus.UNHEALTHY:
            search.status = HealthStatus.DEGRADED
        checks["search"] = search

    ready = all(
        checks[name].status == HealthStatus.HEALTHY for name in ("database", "redis")
    )
    body = ReadinessResponse(
        status=ReadinessStatus.READY if ready else ReadinessStatus.NOT_READY,
        timestamp=datetime.now(UTC),
        version=settings.app.version,
        checks=checks,
    )
    return ORJSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(mode="json"),
    )
