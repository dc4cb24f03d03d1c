"""
StakingEntry model.

Represents a single staked principal with its own daily ROI and lifetime cap.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, MoneyType, RatePercentType
from app.models.earning_cap import EarningCap, cap_from_column
from app.models.enums import StakingStatus


if TYPE_CHECKING:
    from app.models.user import User
    from app.models.voucher import Voucher


class StakingEntry(Base):
    """
    StakingEntry entity.

    Attributes:
        id: Primary key
        user_id: Owner of the stake
        package_id: Catalog package id (None for voucher stakes)
        package_name: Human-readable package label
        amount: Staked principal
        daily_roi: Daily yield rate in percent (1.1 = 1.1%)
        max_earning: Lifetime yield cap, NULL when uncapped
        total_earned: Lifetime yield earned so far (ROI and team credits)
        status: active / completed
        currency: Ledger currency
        created_at: Stake creation time, defines settlement order
        end_date: When the cap was reached
    """

    __tablename__ = "staking_entries"
    __table_args__ = (
        CheckConstraint(
            "amount > 0", name="check_staking_entry_amount_positive"
        ),
        CheckConstraint(
            "daily_roi >= 0", name="check_staking_entry_roi_non_negative"
        ),
        CheckConstraint(
            "total_earned >= 0",
            name="check_staking_entry_earned_non_negative",
        ),
        CheckConstraint(
            "max_earning IS NULL OR total_earned <= max_earning",
            name="check_staking_entry_earned_not_exceeds_cap",
        ),
        Index("idx_staking_entry_user_status", "user_id", "status"),
        Index("idx_staking_entry_status_created", "status", "created_at"),
    )

    # Primary key
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Owner
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Package
    package_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    package_name: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )

    # Stake economics
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    daily_roi: Mapped[Decimal] = mapped_column(
        RatePercentType, nullable=False
    )
    max_earning: Mapped[Decimal | None] = mapped_column(
        MoneyType,
        nullable=True,
        comment="Lifetime earning cap; NULL means uncapped",
    )
    total_earned: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )

    # Status
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=StakingStatus.ACTIVE.value,
        index=True,
    )
    currency: Mapped[str] = mapped_column(
        String(10), nullable=False, default="USDT"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="staking_entries",
    )
    voucher: Mapped["Voucher | None"] = relationship(
        "Voucher",
        back_populates="applied_to_stake",
        uselist=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<StakingEntry(id={self.id}, user_id={self.user_id}, "
            f"amount={self.amount}, earned={self.total_earned}, "
            f"status={self.status})>"
        )

    @property
    def earning_cap(self) -> EarningCap:
        """Lifetime cap as a tagged variant."""
        return cap_from_column(self.max_earning)

    @property
    def is_active(self) -> bool:
        """Check if entry still accrues yield."""
        return self.status == StakingStatus.ACTIVE.value

    @property
    def remaining_cap(self) -> Decimal | None:
        """Remaining cap space, None for uncapped entries."""
        if self.max_earning is None:
            return None
        return max(self.max_earning - (self.total_earned or Decimal("0")), Decimal("0"))
