"""Prometheus metrics instrumentation.

HTTP request count, latency and in-flight gauges come from
prometheus-fastapi-instrumentator. Domain counters live next to it so every
metric shares the ``recipes_api`` namespace.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator, metrics

from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from fastapi import FastAPI

    from recipes_api.core.config import Settings

logger = get_logger(__name__)

METRIC_NAMESPACE = "recipes_api"

AUTH_EVENTS = Counter(
    "auth_events_total",
    "Authentication events by kind and outcome",
    labelnames=("event", "outcome"),
    namespace=METRIC_NAMESPACE,
)

SEARCH_REQUESTS = Counter(
    "search_requests_total",
    "Search service calls by index and outcome",
    labelnames=("index", "outcome"),
    namespace=METRIC_NAMESPACE,
)


def setup_metrics(app: FastAPI, settings: Settings) -> Instrumentator | None:
    """Instrument the app and expose ``/metrics``.

    Args:
        app: The FastAPI application instance.
        settings: Application settings.

    Returns:
        The configured Instrumentator, or None when metrics are disabled.
    """
    if not settings.observability.metrics.enabled:
        logger.info("Metrics collection disabled")
        return None

    prefix = settings.api.prefix

    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=[
            f"{prefix}/health",
            f"{prefix}/ready",
            f"{prefix}/metrics",
        ],
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True,
    )
    instrumentator.add(
        metrics.default(
            metric_namespace=METRIC_NAMESPACE,
            metric_subsystem="http",
        )
    )
    instrumentator.instrument(app)

    endpoint = f"{prefix}/metrics"
    instrumentator.expose(app, endpoint=endpoint, tags=["monitoring"])
    logger.info("Prometheus metrics configured", endpoint=endpoint)

    return instrumentator


__all__ = ["AUTH_EVENTS", "SEARCH_REQUESTS", "setup_metrics"]
