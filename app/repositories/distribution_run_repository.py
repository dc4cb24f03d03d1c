"""
DistributionRun repository.

Data access layer for the distribution run registry.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.distribution_run import DistributionRun
from app.models.enums import DistributionKind, DistributionRunStatus
from app.repositories.base import BaseRepository
from app.utils.datetime_utils import utc_now


class DistributionRunRepository(BaseRepository[DistributionRun]):
    """DistributionRun repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize distribution run repository."""
        super().__init__(DistributionRun, session)

    async def get_run(
        self, kind: DistributionKind, run_date: date
    ) -> DistributionRun | None:
        """
        Get the recorded run for a kind and date.

        Args:
            kind: roi / team
            run_date: Distribution date

        Returns:
            Run or None if the date has not been distributed
        """
        return await self.get_by(kind=kind.value, run_date=run_date)

    async def record_run(
        self,
        kind: DistributionKind,
        run_date: date,
        units_processed: int,
        units_failed: int,
        total_rewarded: Decimal,
        total_missed: Decimal,
    ) -> DistributionRun:
        """
        Record a finished run.

        Args:
            kind: roi / team
            run_date: Distribution date
            units_processed: Units settled successfully
            units_failed: Units rolled back
            total_rewarded: Amount credited
            total_missed: Amount lost to caps

        Returns:
            Created run
        """
        status = (
            DistributionRunStatus.PARTIAL
            if units_failed
            else DistributionRunStatus.COMPLETED
        )
        return await self.create(
            kind=kind.value,
            run_date=run_date,
            status=status.value,
            units_processed=units_processed,
            units_failed=units_failed,
            total_rewarded=total_rewarded,
            total_missed=total_missed,
            finished_at=utc_now(),
        )
