"""Tests for the daily distribution pipeline."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.services.staking.pipeline import run_daily_distribution
from app.services.staking.roi_distributor import RoiDistributionSummary
from app.services.staking.team_earnings_distributor import TeamDistributionSummary


MODULE = "app.services.staking.pipeline"


class TestRunDailyDistribution:
    """Test run_daily_distribution."""

    @pytest.mark.asyncio
    async def test_roi_runs_before_team_with_same_date(self, session_maker):
        calls = []

        roi = MagicMock()
        roi.distribute_daily_staking_rewards = AsyncMock(
            side_effect=lambda run_date: calls.append(("roi", run_date))
            or RoiDistributionSummary(total_users=2, total_rewarded=Decimal("40"))
        )
        team = MagicMock()
        team.distribute_team_earnings = AsyncMock(
            side_effect=lambda run_date: calls.append(("team", run_date))
            or TeamDistributionSummary(rewarded_users=1, total_rewarded=Decimal("4"))
        )

        with patch(f"{MODULE}.RoiDistributor", return_value=roi) as roi_cls, \
             patch(f"{MODULE}.TeamEarningsDistributor", return_value=team):
            result = await run_daily_distribution(session_maker, date(2026, 3, 1))

        assert calls == [("roi", date(2026, 3, 1)), ("team", date(2026, 3, 1))]
        roi_cls.assert_called_once_with(session_maker)

        payload = result.to_dict()
        assert payload["run_date"] == "2026-03-01"
        assert payload["roi"]["total_rewarded"] == "40"
        assert payload["team"]["rewarded_users"] == 1

    @pytest.mark.asyncio
    async def test_defaults_to_today(self, session_maker):
        roi = MagicMock()
        roi.distribute_daily_staking_rewards = AsyncMock(return_value=RoiDistributionSummary())
        team = MagicMock()
        team.distribute_team_earnings = AsyncMock(return_value=TeamDistributionSummary())

        with patch(f"{MODULE}.RoiDistributor", return_value=roi), \
             patch(f"{MODULE}.TeamEarningsDistributor", return_value=team), \
             patch(f"{MODULE}.utc_today", return_value=date(2026, 5, 5)):
            result = await run_daily_distribution(session_maker)

        assert result.run_date == date(2026, 5, 5)
        team.distribute_team_earnings.assert_awaited_once_with(run_date=date(2026, 5, 5))
