"""
Ordinary yield ledger model.

Per-run record of the ordinary (non-voucher) yield each user received.
Written by the ROI distributor, read by the team earnings distributor.
"""

from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, MoneyType


class OrdinaryYieldLedger(Base):
    """One row per (run_date, user_id)."""

    __tablename__ = "ordinary_yield_ledger"
    __table_args__ = (
        UniqueConstraint(
            "run_date", "user_id", name="uq_ordinary_yield_run_user"
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    run_date: Mapped[date] = mapped_column(
        Date, nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"OrdinaryYieldLedger(run_date={self.run_date}, "
            f"user_id={self.user_id}, amount={self.amount})"
        )
