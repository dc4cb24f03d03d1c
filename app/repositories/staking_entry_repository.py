"""
StakingEntry repository.

Data access layer for StakingEntry model.
"""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import StakingStatus
from app.models.staking_entry import StakingEntry
from app.repositories.base import BaseRepository


class StakingEntryRepository(BaseRepository[StakingEntry]):
    """StakingEntry repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize staking entry repository."""
        super().__init__(StakingEntry, session)

    async def get_active_entries(
        self,
        user_id: int | None = None,
        for_update: bool = False,
    ) -> list[StakingEntry]:
        """
        Get active entries, oldest first.

        Args:
            user_id: Optional owner filter
            for_update: Lock rows (SELECT FOR UPDATE)

        Returns:
            Active entries ordered by creation time
        """
        stmt = select(StakingEntry).where(
            StakingEntry.status == StakingStatus.ACTIVE.value
        )
        if user_id is not None:
            stmt = stmt.where(StakingEntry.user_id == user_id)

        stmt = stmt.order_by(StakingEntry.created_at.asc(), StakingEntry.id.asc())

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_active_by_ids(
        self, entry_ids: Iterable[int], for_update: bool = True
    ) -> list[StakingEntry]:
        """
        Re-load a known set of entries inside a unit of work.

        Entries completed since they were scanned are skipped.

        Args:
            entry_ids: Entry IDs to load
            for_update: Lock rows (SELECT FOR UPDATE)

        Returns:
            Still-active entries ordered by creation time
        """
        ids = list(entry_ids)
        if not ids:
            return []

        stmt = (
            select(StakingEntry)
            .where(
                StakingEntry.id.in_(ids),
                StakingEntry.status == StakingStatus.ACTIVE.value,
            )
            .order_by(StakingEntry.created_at.asc(), StakingEntry.id.asc())
        )
        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_entries_for_report(
        self, active_only: bool = False
    ) -> list[StakingEntry]:
        """
        Get entries grouped by user for the staking summary report.

        Args:
            active_only: Only include active entries

        Returns:
            Entries ordered by user, then creation time
        """
        stmt = select(StakingEntry).options(selectinload(StakingEntry.user))
        if active_only:
            stmt = stmt.where(StakingEntry.status == StakingStatus.ACTIVE.value)

        stmt = stmt.order_by(
            StakingEntry.user_id.asc(), StakingEntry.created_at.asc()
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
