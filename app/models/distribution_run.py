"""
DistributionRun model.

Registry of completed batch runs. (kind, run_date) is the idempotency key
that keeps a daily distribution from being paid twice.
"""

from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import (
    Date,
    DateTime,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, MoneyType
from app.models.enums import DistributionRunStatus


class DistributionRun(Base):
    """
    DistributionRun entity.

    Attributes:
        id: Primary key
        kind: roi / team
        run_date: Distribution date
        status: completed / partial
        units_processed: Users (roi) or sponsors (team) settled
        units_failed: Units whose transaction was rolled back
        total_rewarded: Amount credited by the run
        total_missed: Amount lost to caps
        started_at: Run start time
        finished_at: Run finish time
    """

    __tablename__ = "distribution_runs"
    __table_args__ = (
        UniqueConstraint(
            "kind", "run_date", name="uq_distribution_run_kind_date"
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    run_date: Mapped[date] = mapped_column(
        Date, nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DistributionRunStatus.COMPLETED.value,
    )

    # Counters
    units_processed: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    units_failed: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    total_rewarded: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    total_missed: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )

    # Timestamps
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    finished_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"DistributionRun(kind={self.kind}, run_date={self.run_date}, "
            f"status={self.status})"
        )
