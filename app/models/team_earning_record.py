"""
TeamEarningRecord model.

Append-only audit trail of team earnings actually credited to a sponsor.
"""

from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, MoneyType


class TeamEarningRecord(Base):
    """
    TeamEarningRecord entity.

    Attributes:
        id: Primary key
        user_id: Sponsor who received the credit
        source_user_id: Downstream user whose yield generated it
        level: Sponsor level relative to the source user (1-6)
        amount: Amount actually credited after cap clamping
        run_date: Distribution date
        created_at: Record creation timestamp
    """

    __tablename__ = "team_earning_records"
    __table_args__ = (
        CheckConstraint(
            "level >= 1 AND level <= 6",
            name="check_team_earning_level_range",
        ),
        CheckConstraint(
            "amount > 0", name="check_team_earning_amount_positive"
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    source_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)

    run_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"TeamEarningRecord(id={self.id}, user_id={self.user_id}, "
            f"source_user_id={self.source_user_id}, level={self.level}, "
            f"amount={self.amount})"
        )


# Composite indexes
Index(
    "idx_team_earning_user_created",
    TeamEarningRecord.user_id,
    TeamEarningRecord.created_at,
)
