"""
Sponsor service.

Registers who invited whom and answers upline queries.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import TEAM_DEPTH
from app.models.invited_member import InvitedMember
from app.repositories.invited_member_repository import InvitedMemberRepository
from app.services.base_service import BaseService, transaction
from app.services.staking.sponsor_chain import walk_sponsor_chain
from app.utils.exceptions import SponsorshipError


class SponsorService(BaseService):
    """Sponsor relationship management."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize sponsor service."""
        super().__init__(session)
        self.member_repo = InvitedMemberRepository(session)

    @transaction
    async def register_sponsor(
        self, user_id: int, sponsor_id: int
    ) -> InvitedMember:
        """
        Record that ``sponsor_id`` invited ``user_id``.

        Args:
            user_id: Invited user
            sponsor_id: Inviting user

        Returns:
            Created relationship

        Raises:
            SponsorshipError: Self-sponsorship, user already sponsored, or
                the relationship would close a cycle
        """
        if user_id == sponsor_id:
            raise SponsorshipError("A user cannot sponsor themselves")

        existing = await self.member_repo.get_sponsor_id(user_id)
        if existing is not None:
            raise SponsorshipError(
                f"User {user_id} is already sponsored by {existing}"
            )

        # Walk the sponsor's full upline; reaching user_id means a loop
        visited = {sponsor_id}
        current = sponsor_id
        while True:
            parent = await self.member_repo.get_sponsor_id(current)
            if parent is None or parent in visited:
                break
            if parent == user_id:
                self.logger.warning(
                    "Sponsor loop rejected",
                    extra={"user_id": user_id, "sponsor_id": sponsor_id},
                )
                raise SponsorshipError(
                    "Sponsor relationship would create a cycle"
                )
            visited.add(parent)
            current = parent

        member = await self.member_repo.create(
            user_id=user_id, sponsor_id=sponsor_id
        )
        self.logger.info(
            "Sponsor registered",
            extra={"user_id": user_id, "sponsor_id": sponsor_id},
        )
        return member

    async def get_upline(
        self, user_id: int, depth: int = TEAM_DEPTH
    ) -> list[tuple[int, int]]:
        """
        Get a user's sponsors that share in their team earnings.

        Args:
            user_id: Downline user
            depth: Maximum levels

        Returns:
            (level, sponsor_id) pairs, level 1 = direct sponsor
        """
        sponsor_map = await self.member_repo.get_sponsor_map()
        return walk_sponsor_chain(user_id, sponsor_map, max_depth=depth)
