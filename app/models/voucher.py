"""
Voucher model.

Promotional vouchers. A used voucher linked to a staking entry marks that
entry's yield as promotional.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, MoneyType
from app.models.enums import VoucherStatus


if TYPE_CHECKING:
    from app.models.staking_entry import StakingEntry


class Voucher(Base):
    """
    Voucher entity.

    Attributes:
        id: Primary key
        code: Redemption code
        user_id: Owner of the voucher
        value: Face value in USDT
        status: unused / used / expired
        applied_to_stake_id: Staking entry created on redemption
        used_at: Redemption timestamp
    """

    __tablename__ = "vouchers"
    __table_args__ = (
        Index("idx_voucher_stake_status", "applied_to_stake_id", "status"),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    code: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, index=True
    )
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    value: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=VoucherStatus.UNUSED.value,
        index=True,
    )

    # At most one voucher per staking entry
    applied_to_stake_id: Mapped[int | None] = mapped_column(
        ForeignKey("staking_entries.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    used_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    applied_to_stake: Mapped["StakingEntry | None"] = relationship(
        "StakingEntry",
        back_populates="voucher",
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Voucher(id={self.id}, code={self.code}, "
            f"status={self.status}, stake={self.applied_to_stake_id})>"
        )
