"""Job enqueue utilities used by the web process."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from arq.connections import ArqRedis, create_pool

from recipes_api.core.config import get_settings
from recipes_api.observability.logging import get_logger
from recipes_api.workers.arq import get_redis_settings


if TYPE_CHECKING:
    from uuid import UUID

    from arq.jobs import Job

logger = get_logger(__name__)

_arq_pool: ArqRedis | None = None


async def get_arq_pool() -> ArqRedis:
    """Get or lazily create the arq connection pool."""
    global _arq_pool  # noqa: PLW0603

    if _arq_pool is None:
        _arq_pool = await create_pool(get_redis_settings())
        logger.debug("Created ARQ connection pool")

    return _arq_pool


async def close_arq_pool() -> None:
    global _arq_pool  # noqa: PLW0603

    if _arq_pool is not None:
        await _arq_pool.aclose()
        _arq_pool = None
        logger.debug("Closed ARQ connection pool")


async def enqueue_job(
    function_name: str,
    *args: Any,
    _job_id: str | None = None,
    _defer_by: float | None = None,
    **kwargs: Any,
) -> Job | None:
    """Enqueue a background job.

    Failures are logged rather than raised: a missed reindex or email is
    retried by the next cron run or by the user, and must not fail the
    request that triggered it.

    Returns:
        The Job, or None if enqueueing failed or a job with ``_job_id`` is
        already pending.
    """
    settings = get_settings()
    try:
        pool = await get_arq_pool()
        job = await pool.enqueue_job(
            function_name,
            *args,
            _job_id=_job_id,
            _queue_name=settings.arq.queue_name,
            _defer_by=_defer_by,
            **kwargs,
        )
    except Exception:
        logger.exception("Failed to enqueue job", function=function_name)
        return None

    logger.info(
        "Enqueued job",
        function=function_name,
        job_id=job.job_id if job else None,
        deduplicated=job is None,
    )
    return job


async def enqueue_confirmation_email(user_id: UUID, email: str, name: str) -> Job | None:
    return await enqueue_job("send_confirmation_email", str(user_id), email, name)


async def enqueue_ingredients_reindex() -> Job | None:
    """Enqueue an ingredient reindex; at most one is pending at a time."""
    settings = get_settings()
    return await enqueue_job(
        "index_ingredients", _job_id=settings.arq.job_ids.reindex_ingredients
    )


async def enqueue_recipes_reindex() -> Job | None:
    """Enqueue a recipe reindex; at most one is pending at a time."""
    settings = get_settings()
    return await enqueue_job(
        "index_recipes", _job_id=settings.arq.job_ids.reindex_recipes
    )


async def enqueue_recipe_removal(recipe_id: UUID) -> Job | None:
    return await enqueue_job("remove_recipe_document", str(recipe_id))
