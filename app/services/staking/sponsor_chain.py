"""
Sponsor chain traversal.

Walks the invited-by relationships upward and accumulates level-weighted
team rewards per sponsor.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from loguru import logger

from app.config.business_constants import TEAM_DEPTH, get_team_rate
from app.services.staking.settlement import ZERO, quantize_money


@dataclass
class SponsorReward:
    """Pending team reward for one sponsor."""

    sponsor_id: int
    total_amount: Decimal = ZERO
    # (source_user_id, level, amount) in the order they were recorded
    contributions: list[tuple[int, int, Decimal]] = field(default_factory=list)

    def add(self, source_user_id: int, level: int, amount: Decimal) -> None:
        """Record one contribution."""
        self.total_amount += amount
        self.contributions.append((source_user_id, level, amount))


def walk_sponsor_chain(
    user_id: int,
    sponsor_map: dict[int, int],
    max_depth: int = TEAM_DEPTH,
) -> list[tuple[int, int]]:
    """
    Walk up the sponsor chain of a user.

    Traversal stops at ``max_depth`` hops, when a user has no sponsor, or
    when a sponsor repeats (corrupted data forming a cycle).

    Args:
        user_id: Starting (earning) user
        sponsor_map: Mapping invited user_id -> sponsor_id
        max_depth: Maximum number of levels

    Returns:
        (level, sponsor_id) pairs, level 1 = direct sponsor
    """
    chain: list[tuple[int, int]] = []
    visited = {user_id}
    current = user_id

    for level in range(1, max_depth + 1):
        sponsor_id = sponsor_map.get(current)
        if sponsor_id is None:
            break

        if sponsor_id in visited:
            logger.warning(
                "Sponsor cycle detected, stopping traversal",
                extra={
                    "user_id": user_id,
                    "sponsor_id": sponsor_id,
                    "level": level,
                },
            )
            break

        visited.add(sponsor_id)
        chain.append((level, sponsor_id))
        current = sponsor_id

    return chain


def accumulate_team_rewards(
    earners: Iterable[tuple[int, Decimal]],
    sponsor_map: dict[int, int],
) -> dict[int, SponsorReward]:
    """
    Accumulate pending team rewards for every sponsor.

    Each earner's ordinary yield is weighted by the level rate of every
    sponsor found above them. Zero rewards are skipped.

    Args:
        earners: (user_id, ordinary_yield) pairs
        sponsor_map: Mapping invited user_id -> sponsor_id

    Returns:
        Mapping sponsor_id -> SponsorReward, in first-credited order
    """
    rewards: dict[int, SponsorReward] = {}

    for user_id, ordinary_yield in earners:
        if ordinary_yield <= 0:
            continue

        for level, sponsor_id in walk_sponsor_chain(user_id, sponsor_map):
            amount = quantize_money(ordinary_yield * get_team_rate(level))
            if amount <= 0:
                continue

            reward = rewards.get(sponsor_id)
            if reward is None:
                reward = rewards[sponsor_id] = SponsorReward(sponsor_id)
            reward.add(user_id, level, amount)

    return rewards
