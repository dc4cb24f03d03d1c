"""
InvitedMember model.

Represents the sponsor relationship: who invited whom.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base

if TYPE_CHECKING:
    from app.models.user import User


class InvitedMember(Base):
    """InvitedMember model - one sponsor per invited user."""

    __tablename__ = "invited_members"
    __table_args__ = (
        CheckConstraint(
            "user_id <> sponsor_id", name="check_invited_member_not_self"
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Invited user (at most one sponsor each)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    # Sponsor (who invited)
    sponsor_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        foreign_keys=[user_id],
    )
    sponsor: Mapped["User"] = relationship(
        "User",
        foreign_keys=[sponsor_id],
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<InvitedMember(user_id={self.user_id}, "
            f"sponsor_id={self.sponsor_id})>"
        )
