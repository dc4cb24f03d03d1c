"""
UserBalance model.

One balance record per user, mutated by every distribution step.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, MoneyType


if TYPE_CHECKING:
    from app.models.user import User


class UserBalance(Base):
    """
    UserBalance entity.

    Attributes:
        user_id: Owner (primary key)
        balance: Available balance
        on_staking: Principal currently staked
        daily_earning: Today's ordinary (non-voucher) yield, reset per ROI run
        latest_earning: Total paid by the most recent ROI run
        team_earning: Lifetime team earnings credited
        missed_earnings: Lifetime overflow lost to caps
    """

    __tablename__ = "user_balances"
    __table_args__ = (
        CheckConstraint(
            "balance >= 0", name="check_user_balance_non_negative"
        ),
        CheckConstraint(
            "on_staking >= 0", name="check_user_on_staking_non_negative"
        ),
        CheckConstraint(
            "missed_earnings >= 0",
            name="check_user_missed_earnings_non_negative",
        ),
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # Balances
    balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    on_staking: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Distribution counters
    daily_earning: Mapped[Decimal] = mapped_column(
        MoneyType,
        default=Decimal("0"),
        nullable=False,
        comment="Ordinary yield credited by the latest ROI run",
    )
    latest_earning: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    team_earning: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    missed_earnings: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Timestamps
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="balance_record",
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<UserBalance(user_id={self.user_id}, balance={self.balance}, "
            f"on_staking={self.on_staking})>"
        )
