"""
Distribution scheduler.

Enqueues the daily distribution pipeline on a cron schedule and serves
health checks for the scheduler process.

Run:
    python -m jobs.scheduler
"""

import asyncio
import signal
import sys

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger

from app.config.settings import settings
from jobs.broker import broker  # noqa: F401  (binds actors to Redis)
from jobs.health import set_scheduler, start_health_server, stop_health_server
from jobs.tasks.daily_rewards import run_daily_distribution_task


DAILY_DISTRIBUTION_JOB_ID = "daily_distribution"


def configure_logging() -> None:
    """Console sink plus rotating file sink."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
    logger.add(
        settings.log_file,
        level=settings.log_level,
        rotation="1 day",
        retention="30 days",
        compression="zip",
        enqueue=True,
    )


def enqueue_daily_distribution() -> None:
    """Send the daily pipeline to the worker queue."""
    message = run_daily_distribution_task.send()
    logger.info(
        "Daily distribution enqueued",
        extra={"message_id": message.message_id},
    )


def create_scheduler() -> AsyncIOScheduler:
    """
    Build the scheduler with the daily distribution job.

    Returns:
        Configured (not started) scheduler
    """
    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        enqueue_daily_distribution,
        CronTrigger(
            hour=settings.distribution_cron_hour,
            minute=settings.distribution_cron_minute,
            timezone="UTC",
        ),
        id=DAILY_DISTRIBUTION_JOB_ID,
        name="Daily ROI and team earnings distribution",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler


async def main() -> None:
    """Start scheduler and health server, run until a stop signal."""
    configure_logging()

    scheduler = create_scheduler()
    scheduler.start()
    set_scheduler(scheduler)

    runner, _ = await start_health_server(port=settings.health_check_port)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    logger.info(
        f"Scheduler started: daily distribution at "
        f"{settings.distribution_cron_hour:02d}:{settings.distribution_cron_minute:02d} UTC"
    )

    try:
        await stop_event.wait()
    finally:
        scheduler.shutdown(wait=False)
        await stop_health_server(runner)
        logger.info("Scheduler stopped")


if __name__ == "__main__":
    asyncio.run(main())
