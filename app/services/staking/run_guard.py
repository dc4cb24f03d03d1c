"""
Distribution run guards.

Emergency stop checks and the run registry that keeps a distribution date
from being paid twice.
"""

from datetime import date
from decimal import Decimal

from loguru import logger

from app.config.settings import settings
from app.models.enums import DistributionKind
from app.repositories.distribution_run_repository import (
    DistributionRunRepository,
)
from app.services.staking.unit_of_work import SessionMaker
from app.utils.exceptions import DistributionBlockedError


def ensure_not_blocked(kind: DistributionKind) -> None:
    """
    Check the emergency stop flag for a distribution kind.

    Raises:
        DistributionBlockedError: If the stop flag is set
    """
    blocked = {
        DistributionKind.ROI: settings.emergency_stop_roi,
        DistributionKind.TEAM: settings.emergency_stop_team_earnings,
    }[kind]
    if blocked:
        raise DistributionBlockedError(kind.value)


async def is_already_distributed(
    session_maker: SessionMaker, kind: DistributionKind, run_date: date
) -> bool:
    """
    Check whether a run for this kind and date was already recorded.

    Partial runs count as distributed: the units that succeeded were paid.
    Failed units are re-run with a user-scoped ROI run.
    """
    async with session_maker() as session:
        run = await DistributionRunRepository(session).get_run(kind, run_date)

    if run is not None:
        logger.warning(
            f"{kind.value} distribution for {run_date} already recorded, skipping",
            extra={
                "kind": kind.value,
                "run_date": run_date.isoformat(),
                "status": run.status,
            },
        )
        return True
    return False


async def record_run(
    session_maker: SessionMaker,
    kind: DistributionKind,
    run_date: date,
    units_processed: int,
    units_failed: int,
    total_rewarded: Decimal,
    total_missed: Decimal,
) -> None:
    """Store the finished run in the registry."""
    async with session_maker() as session:
        await DistributionRunRepository(session).record_run(
            kind=kind,
            run_date=run_date,
            units_processed=units_processed,
            units_failed=units_failed,
            total_rewarded=total_rewarded,
            total_missed=total_missed,
        )
        await session.commit()
