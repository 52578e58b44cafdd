"""ARQ worker configuration.

Run with: ``arq recipes_api.workers.arq.WorkerSettings``
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any, ClassVar

from arq import cron, func
from arq.connections import RedisSettings

from recipes_api.clients.email.client import EmailClient
from recipes_api.clients.search.client import SearchClient
from recipes_api.core.config import get_settings
from recipes_api.database.connection import close_database_pool, init_database_pool
from recipes_api.observability.errors import setup_error_tracking
from recipes_api.observability.logging import get_logger, setup_logging
from recipes_api.workers.tasks.email import send_confirmation_email
from recipes_api.workers.tasks.search_index import (
    index_ingredients,
    index_recipes,
    reindex_search,
    remove_recipe_document,
)


if TYPE_CHECKING:
    from arq.cron import CronJob
    from arq.worker import Function


logger = get_logger(__name__)

WorkerFunction = Callable[..., Coroutine[Any, Any, Any]]


async def startup(ctx: dict[str, Any]) -> None:
    """Open the database pool and HTTP clients the tasks share."""
    settings = get_settings()

    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )
    setup_error_tracking(settings)

    logger.info("ARQ worker starting", environment=settings.APP_ENV)

    ctx["settings"] = settings

    await init_database_pool()

    search_client = SearchClient(settings)
    await search_client.initialize()
    ctx["search_client"] = search_client

    email_client = EmailClient(settings)
    await email_client.initialize()
    ctx["email_client"] = email_client


async def shutdown(ctx: dict[str, Any]) -> None:
    logger.info("ARQ worker shutting down")

    for key in ("search_client", "email_client"):
        client = ctx.get(key)
        if client is not None:
            await client.shutdown()

    await close_database_pool()


def get_redis_settings() -> RedisSettings:
    """Redis settings for the job queue database."""
    settings = get_settings()

    return RedisSettings(
        host=settings.redis.host,
        port=settings.redis.port,
        username=settings.redis.user,
        password=settings.REDIS_PASSWORD or None,
        database=settings.redis.queue_db,
    )


class WorkerSettings:
    """Settings object read by the arq CLI."""

    redis_settings = get_redis_settings()
    queue_name = get_settings().arq.queue_name
    health_check_key = get_settings().arq.health_check_key

    on_startup = startup
    on_shutdown = shutdown

    job_timeout = 300
    max_jobs = 10
    keep_result = 3600
    max_tries = get_settings().arq.max_tries

    # Reindex jobs are enqueued under fixed ids; not keeping their results
    # lets the same id be enqueued again as soon as a run finishes.
    functions: ClassVar[list[WorkerFunction | Function]] = [
        func(index_ingredients, keep_result=0),
        func(index_recipes, keep_result=0),
        func(reindex_search, keep_result=0),
        remove_recipe_document,
        send_confirmation_email,
    ]

    cron_jobs: ClassVar[list[CronJob]] = [
        cron(reindex_search, minute=0, run_at_startup=True),  # type: ignore[arg-type]
    ]
