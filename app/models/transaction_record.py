"""
TransactionRecord model.

Append-only ledger entry documenting every balance mutation.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, MoneyType
from app.models.enums import TransactionStatus


class TransactionRecord(Base):
    """TransactionRecord model - balance mutation ledger."""

    __tablename__ = "transaction_records"

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    type: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True
    )  # dailyReward, teamEarning, stake
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    currency: Mapped[str] = mapped_column(
        String(10), nullable=False, default="USDT"
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=TransactionStatus.COMPLETED.value,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Optional link to the staking entry that produced the movement
    reference_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<TransactionRecord(id={self.id}, user_id={self.user_id}, "
            f"type={self.type}, amount={self.amount})>"
        )
