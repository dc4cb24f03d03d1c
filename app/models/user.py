"""
User model.

Represents a registered platform account. Authentication and profile data
live elsewhere; only what the reward engine needs is mapped here.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base

if TYPE_CHECKING:
    from app.models.staking_entry import StakingEntry
    from app.models.user_balance import UserBalance


class User(Base):
    """User model - registered platform accounts."""

    __tablename__ = "users"

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Profile
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    username: Mapped[str | None] = mapped_column(
        String(255), nullable=True, unique=True, index=True
    )
    email: Mapped[str | None] = mapped_column(
        String(255), nullable=True, unique=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    balance_record: Mapped["UserBalance | None"] = relationship(
        "UserBalance",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    staking_entries: Mapped[list["StakingEntry"]] = relationship(
        "StakingEntry",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<User(id={self.id}, username={self.username})>"

    @property
    def display_name(self) -> str:
        """Name for reports: name, then @username, then id."""
        if self.name and self.name.strip():
            return self.name.strip()
        if self.username and self.username.strip():
            return f"@{self.username.strip()}"
        return str(self.id)
