"""
OrdinaryYieldLedger repository.

Data access layer for the per-run ordinary yield handoff.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.ordinary_yield_ledger import OrdinaryYieldLedger
from app.repositories.base import BaseRepository


class OrdinaryYieldRepository(BaseRepository[OrdinaryYieldLedger]):
    """OrdinaryYieldLedger repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize ordinary yield repository."""
        super().__init__(OrdinaryYieldLedger, session)

    async def replace_for_user(
        self, run_date: date, user_id: int, amount: Decimal
    ) -> None:
        """
        Store a user's ordinary yield for a run date.

        A row left by an earlier run on the same date is replaced. Nothing
        is stored for a zero amount.

        Args:
            run_date: Distribution date
            user_id: Earner user ID
            amount: Ordinary yield paid by this run
        """
        await self.delete_by(run_date=run_date, user_id=user_id)
        if amount > 0:
            await self.create(run_date=run_date, user_id=user_id, amount=amount)

    async def get_earners(self, run_date: date) -> list[tuple[int, Decimal]]:
        """
        Get users with positive ordinary yield for a run date.

        Args:
            run_date: Distribution date

        Returns:
            (user_id, amount) pairs in ledger insertion order
        """
        stmt = (
            select(OrdinaryYieldLedger.user_id, OrdinaryYieldLedger.amount)
            .where(
                OrdinaryYieldLedger.run_date == run_date,
                OrdinaryYieldLedger.amount > 0,
            )
            .order_by(OrdinaryYieldLedger.id.asc())
        )
        result = await self.session.execute(stmt)
        return [(row.user_id, row.amount) for row in result.all()]
