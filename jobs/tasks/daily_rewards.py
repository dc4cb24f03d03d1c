"""
Daily rewards tasks.

Dramatiq actors wrapping the ROI and team earnings distributors.
The scheduler enqueues ``run_daily_distribution_task`` once a day; the
single-stage actors are used for targeted re-runs.
"""

from datetime import date

import dramatiq
from loguru import logger

from app.config.database import create_worker_session_maker
from app.services.staking.pipeline import run_daily_distribution
from app.services.staking.roi_distributor import RoiDistributor
from app.services.staking.team_earnings_distributor import (
    TeamEarningsDistributor,
)
from app.utils.datetime_utils import parse_run_date
from jobs.async_runner import run_async


task_session_maker = create_worker_session_maker()


@dramatiq.actor(max_retries=0, time_limit=1_800_000)  # 30 min
def distribute_daily_roi(
    user_id: int | None = None, run_date: str | None = None
) -> dict:
    """
    Distribute daily ROI.

    Args:
        user_id: Only settle this user's entries (targeted re-run)
        run_date: ISO date of the run (defaults to today, UTC)
    """
    logger.info(
        f"Starting daily ROI distribution"
        f"{f' for user {user_id}' if user_id else ''}..."
    )
    result = run_async(_distribute_daily_roi_async(user_id, parse_run_date(run_date)))
    logger.info("Daily ROI task complete", extra=result)
    return result


async def _distribute_daily_roi_async(
    user_id: int | None, run_date: date | None
) -> dict:
    """Async implementation of daily ROI distribution."""
    distributor = RoiDistributor(task_session_maker)
    summary = await distributor.distribute_daily_staking_rewards(
        user_id=user_id, run_date=run_date
    )
    return summary.to_dict()


@dramatiq.actor(max_retries=0, time_limit=1_800_000)  # 30 min
def distribute_team_earnings(run_date: str | None = None) -> dict:
    """
    Distribute team earnings.

    Args:
        run_date: ISO date of the run (defaults to today, UTC)
    """
    logger.info("Starting team earnings distribution...")
    result = run_async(_distribute_team_earnings_async(parse_run_date(run_date)))
    logger.info("Team earnings task complete", extra=result)
    return result


async def _distribute_team_earnings_async(run_date: date | None) -> dict:
    """Async implementation of team earnings distribution."""
    distributor = TeamEarningsDistributor(task_session_maker)
    summary = await distributor.distribute_team_earnings(run_date=run_date)
    return summary.to_dict()


@dramatiq.actor(max_retries=0, time_limit=3_600_000)  # 1 hour
def run_daily_distribution_task(run_date: str | None = None) -> dict:
    """
    Run the full daily pipeline: ROI, then team earnings.

    Args:
        run_date: ISO date of the run (defaults to today, UTC)
    """
    result = run_async(
        run_daily_distribution(task_session_maker, parse_run_date(run_date))
    )
    return result.to_dict()
