"""
TransactionRecord repository.

Data access layer for the balance mutation ledger.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import TransactionStatus, TransactionType
from app.models.transaction_record import TransactionRecord
from app.repositories.base import BaseRepository


class TransactionRecordRepository(BaseRepository[TransactionRecord]):
    """TransactionRecord repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize transaction record repository."""
        super().__init__(TransactionRecord, session)

    async def record(
        self,
        user_id: int,
        type: TransactionType,
        amount: Decimal,
        currency: str,
        description: str,
        reference_id: int | None = None,
    ) -> TransactionRecord:
        """
        Append a completed ledger row.

        Args:
            user_id: Account affected
            type: Transaction type
            amount: Amount moved
            currency: Ledger currency
            description: Statement text
            reference_id: Optional staking entry ID

        Returns:
            Created record
        """
        return await self.create(
            user_id=user_id,
            type=type.value,
            amount=amount,
            currency=currency,
            status=TransactionStatus.COMPLETED.value,
            description=description,
            reference_id=reference_id,
        )
