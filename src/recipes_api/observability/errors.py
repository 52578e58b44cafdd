"""Error tracking with Sentry.

Unhandled exceptions are captured by the FastAPI/Starlette integrations
that ``sentry_sdk.init`` enables automatically; ``report_exception`` covers
errors we catch and convert ourselves (for example in background jobs).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import sentry_sdk

from recipes_api.observability.logging import get_logger


if TYPE_CHECKING:
    from recipes_api.core.config import Settings

logger = get_logger(__name__)


def setup_error_tracking(settings: Settings) -> bool:
    """Initialise Sentry when a DSN is configured.

    Returns:
        True if error reporting is active.
    """
    if not settings.SENTRY_DSN:
        logger.info("Error tracking disabled (no SENTRY_DSN)")
        return False

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.APP_ENV,
        release=f"{settings.app.name}@{settings.app.version}",
        traces_sample_rate=settings.observability.error_tracking.traces_sample_rate,
        send_default_pii=False,
    )
    logger.info("Error tracking configured", environment=settings.APP_ENV)
    return True


def report_exception(exc: BaseException, **context: Any) -> None:
    """Send a handled exception to Sentry with extra context.

    A no-op when Sentry was never initialised.
    """
    with sentry_sdk.new_scope() as scope:
        for key, value in context.items():
            scope.set_extra(key, value)
        sentry_sdk.capture_exception(exc)


__all__ = ["report_exception", "setup_error_tracking"]
