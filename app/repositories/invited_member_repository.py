"""
InvitedMember repository.

Data access layer for sponsor relationships.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.invited_member import InvitedMember
from app.repositories.base import BaseRepository


class InvitedMemberRepository(BaseRepository[InvitedMember]):
    """InvitedMember repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize invited member repository."""
        super().__init__(InvitedMember, session)

    async def get_sponsor_map(self) -> dict[int, int]:
        """
        Load the full sponsor relationship set.

        Returns:
            Mapping invited user_id -> sponsor_id
        """
        stmt = select(InvitedMember.user_id, InvitedMember.sponsor_id)
        result = await self.session.execute(stmt)
        return {row.user_id: row.sponsor_id for row in result.all()}

    async def get_sponsor_id(self, user_id: int) -> int | None:
        """
        Get the direct sponsor of a user.

        Args:
            user_id: Invited user ID

        Returns:
            Sponsor user ID or None
        """
        stmt = select(InvitedMember.sponsor_id).where(
            InvitedMember.user_id == user_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
