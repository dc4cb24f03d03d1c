"""
Daily distribution pipeline.

Runs the ROI distribution and then team earnings for the same run date.
"""

from dataclasses import dataclass
from datetime import date, datetime

from loguru import logger

from app.config.database import async_session_maker
from app.services.staking.roi_distributor import (
    RoiDistributionSummary,
    RoiDistributor,
)
from app.services.staking.team_earnings_distributor import (
    TeamDistributionSummary,
    TeamEarningsDistributor,
)
from app.services.staking.unit_of_work import SessionMaker
from app.utils.datetime_utils import utc_now, utc_today


@dataclass
class DailyDistributionResult:
    """Both summaries of one daily pipeline run."""

    run_date: date
    roi: RoiDistributionSummary
    team: TeamDistributionSummary
    finished_at: datetime

    def to_dict(self) -> dict:
        """Serialize for logs and task results."""
        return {
            "run_date": self.run_date.isoformat(),
            "roi": self.roi.to_dict(),
            "team": self.team.to_dict(),
            "finished_at": self.finished_at.isoformat(),
        }


async def run_daily_distribution(
    session_maker: SessionMaker = async_session_maker,
    run_date: date | None = None,
) -> DailyDistributionResult:
    """
    Run ROI then team earnings distribution.

    Team earnings read the ordinary yield the ROI run recorded for the
    same date, so the two stages always share ``run_date``.

    Args:
        session_maker: Factory for per-unit sessions
        run_date: Distribution date (defaults to today, UTC)

    Returns:
        DailyDistributionResult
    """
    run_date = run_date or utc_today()
    logger.info(f"Daily distribution started for {run_date}")

    roi = await RoiDistributor(session_maker).distribute_daily_staking_rewards(
        run_date=run_date
    )
    team = await TeamEarningsDistributor(session_maker).distribute_team_earnings(
        run_date=run_date
    )

    result = DailyDistributionResult(
        run_date=run_date, roi=roi, team=team, finished_at=utc_now()
    )
    logger.info(
        f"Daily distribution finished for {run_date}",
        extra=result.to_dict(),
    )
    return result
