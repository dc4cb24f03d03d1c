"""
TeamEarningRecord repository.

Data access layer for the team earning audit trail.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.team_earning_record import TeamEarningRecord
from app.repositories.base import BaseRepository


class TeamEarningRepository(BaseRepository[TeamEarningRecord]):
    """TeamEarningRecord repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize team earning repository."""
        super().__init__(TeamEarningRecord, session)

    async def add_records(
        self,
        user_id: int,
        records: list[tuple[int, int, Decimal]],
        run_date: date | None = None,
    ) -> int:
        """
        Append audit rows for one sponsor.

        Args:
            user_id: Sponsor who received the credit
            records: (source_user_id, level, amount) tuples
            run_date: Distribution date

        Returns:
            Number of rows written
        """
        return await self.bulk_create(
            [
                {
                    "user_id": user_id,
                    "source_user_id": source_user_id,
                    "level": level,
                    "amount": amount,
                    "run_date": run_date,
                }
                for source_user_id, level, amount in records
            ]
        )
