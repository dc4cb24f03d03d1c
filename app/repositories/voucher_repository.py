"""
Voucher repository.

Data access layer for Voucher model.
"""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import VoucherStatus
from app.models.voucher import Voucher
from app.repositories.base import BaseRepository


class VoucherRepository(BaseRepository[Voucher]):
    """Voucher repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize voucher repository."""
        super().__init__(Voucher, session)

    async def get_voucher_stake_ids(
        self,
        entry_ids: Iterable[int],
        status: VoucherStatus = VoucherStatus.USED,
    ) -> set[int]:
        """
        Find which staking entries were created from a voucher.

        Args:
            entry_ids: Candidate staking entry IDs
            status: Voucher status to match (used by default)

        Returns:
            Set of entry IDs backed by a voucher
        """
        ids = list(entry_ids)
        if not ids:
            return set()

        stmt = select(Voucher.applied_to_stake_id).where(
            Voucher.applied_to_stake_id.in_(ids),
            Voucher.status == status.value,
        )
        result = await self.session.execute(stmt)
        return {stake_id for stake_id in result.scalars().all() if stake_id is not None}

    async def get_by_code_for_update(self, code: str) -> Voucher | None:
        """
        Get voucher by code with a row lock.

        Args:
            code: Redemption code

        Returns:
            Voucher or None
        """
        stmt = select(Voucher).where(Voucher.code == code).with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
