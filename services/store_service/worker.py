"""ARQ worker for store maintenance (promotion expiry)."""

from arq import cron
from arq.connections import RedisSettings
from libs.common.config import get_settings
from libs.common.logging import configure_logging, get_logger

logger = get_logger(__name__)


def get_redis_settings() -> RedisSettings:
    return RedisSettings.from_dsn(get_settings().REDIS_URL)


def sweep_minutes(interval: int) -> set[int]:
    """Minutes of the hour on which a sweep every ``interval`` minutes runs."""
    interval = max(1, min(interval, 60))
    return set(range(0, 60, interval))


async def task_expire_promotions(ctx: dict):
    from services.store_service.tasks import sweep_expired_promotions

    logger.info("Running: sweep_expired_promotions")
    return await sweep_expired_promotions()


async def startup(ctx: dict):
    configure_logging()


class WorkerSettings:
    redis_settings = get_redis_settings()

    on_startup = startup

    functions = [task_expire_promotions]

    cron_jobs = [
        cron(
            task_expire_promotions,
            minute=sweep_minutes(get_settings().PROMOTION_EXPIRY_SWEEP_MINUTES),
            run_at_startup=True,
        ),
    ]
