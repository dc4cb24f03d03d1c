"""
Tests for sponsor chain traversal and team reward accumulation.

Tests cover:
- Level-weighted rewards up a multi-level chain
- Six-level depth limit
- Cycle tolerance on corrupted sponsor data
"""

from decimal import Decimal

from app.services.staking.sponsor_chain import (
    accumulate_team_rewards,
    walk_sponsor_chain,
)


# D(4) invited by C(3) invited by B(2) invited by A(1)
CHAIN_MAP = {4: 3, 3: 2, 2: 1}


class TestWalkSponsorChain:
    """Test upward traversal."""

    def test_levels_follow_the_chain(self):
        assert walk_sponsor_chain(4, CHAIN_MAP) == [(1, 3), (2, 2), (3, 1)]

    def test_user_without_sponsor(self):
        assert walk_sponsor_chain(1, CHAIN_MAP) == []

    def test_depth_limited_to_six(self):
        """A seven-deep chain stops at level 6."""
        sponsor_map = {user_id: user_id + 1 for user_id in range(1, 10)}

        chain = walk_sponsor_chain(1, sponsor_map)

        assert len(chain) == 6
        assert chain[-1] == (6, 7)

    def test_two_user_cycle_stops(self):
        """A sponsors B and B sponsors A."""
        assert walk_sponsor_chain(1, {1: 2, 2: 1}) == [(1, 2)]

    def test_longer_cycle_stops_on_repeat(self):
        sponsor_map = {1: 2, 2: 3, 3: 2}

        assert walk_sponsor_chain(1, sponsor_map) == [(1, 2), (2, 3)]


class TestAccumulateTeamRewards:
    """Test per-sponsor reward accumulation."""

    def test_multi_level_reward(self):
        """D earns 100: C gets 10, B gets 5, A gets 3."""
        rewards = accumulate_team_rewards([(4, Decimal("100"))], CHAIN_MAP)

        assert rewards[3].total_amount == Decimal("10")
        assert rewards[2].total_amount == Decimal("5")
        assert rewards[1].total_amount == Decimal("3")
        assert rewards[3].contributions == [(4, 1, Decimal("10"))]

    def test_level_weights_over_six_levels(self):
        """Leaf 0 with yield Y under a 7-deep chain."""
        sponsor_map = {level: level + 1 for level in range(0, 7)}

        rewards = accumulate_team_rewards([(0, Decimal("100"))], sponsor_map)

        expected = ["10", "5", "3", "2", "1", "1"]
        for level, amount in enumerate(expected, start=1):
            assert rewards[level].total_amount == Decimal(amount)
        assert 7 not in rewards

    def test_contributions_accumulate_per_sponsor(self):
        """Two earners under the same sponsor add up in insertion order."""
        sponsor_map = {10: 1, 11: 1}

        rewards = accumulate_team_rewards(
            [(10, Decimal("50")), (11, Decimal("20"))], sponsor_map
        )

        assert rewards[1].total_amount == Decimal("7")
        assert rewards[1].contributions == [
            (10, 1, Decimal("5")),
            (11, 1, Decimal("2")),
        ]

    def test_zero_yield_is_skipped(self):
        assert accumulate_team_rewards([(4, Decimal("0"))], CHAIN_MAP) == {}

    def test_dust_rewards_are_skipped(self):
        """Rewards rounding to zero are not recorded."""
        rewards = accumulate_team_rewards([(4, Decimal("0.00000001"))], CHAIN_MAP)

        assert rewards == {}
