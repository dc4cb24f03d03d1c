"""
UserBalance repository.

Data access layer for UserBalance model.
"""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user_balance import UserBalance
from app.repositories.base import BaseRepository


class UserBalanceRepository(BaseRepository[UserBalance]):
    """UserBalance repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user balance repository."""
        super().__init__(UserBalance, session)

    async def get_for_update(self, user_id: int) -> UserBalance | None:
        """
        Get balance record with a row lock.

        Args:
            user_id: Owner user ID

        Returns:
            Locked balance record or None if missing
        """
        stmt = (
            select(UserBalance)
            .where(UserBalance.user_id == user_id)
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_many(
        self, user_ids: Iterable[int]
    ) -> dict[int, UserBalance]:
        """
        Get balances for several users.

        Args:
            user_ids: User IDs

        Returns:
            Mapping user_id -> balance record
        """
        ids = list(user_ids)
        if not ids:
            return {}

        stmt = select(UserBalance).where(UserBalance.user_id.in_(ids))
        result = await self.session.execute(stmt)
        return {row.user_id: row for row in result.scalars().all()}
