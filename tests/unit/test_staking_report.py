"""
Tests for the staking user summary report.

Tests cover:
- Per-user totals with active-only on-stake amounts
- Uncapped entries adding no remaining cap
- Ordering by amount on stake
- JSON and CSV exports
"""

import csv
import io
import json
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.models import StakingStatus, User
from app.services.staking.staking_report import StakingReportService


@pytest.fixture
def report_entries(entry_factory):
    alice = User(id=1, name="Alice", username="alice")
    bob = User(id=2, name=None, username="bob")

    entries = [
        entry_factory(user_id=1, amount="100", max_earning="180", total_earned="30"),
        entry_factory(
            user_id=1,
            amount="250",
            max_earning="500",
            total_earned="500",
            status=StakingStatus.COMPLETED,
        ),
        entry_factory(user_id=2, amount="500", max_earning=None, total_earned="12"),
    ]
    entries[0].user = alice
    entries[1].user = alice
    entries[2].user = bob
    return entries


def _service(mock_session, entries, balances) -> StakingReportService:
    service = StakingReportService(mock_session)
    service.entry_repo = MagicMock()
    service.entry_repo.get_entries_for_report = AsyncMock(return_value=entries)
    service.balance_repo = MagicMock()
    service.balance_repo.get_many = AsyncMock(return_value=balances)
    return service


class TestBuildUserSummary:
    """Test build_user_summary."""

    @pytest.mark.asyncio
    async def test_per_user_totals(self, mock_session, report_entries, balance_factory):
        balances = {1: balance_factory(user_id=1, balance="42.5")}
        service = _service(mock_session, report_entries, balances)

        report = await service.build_user_summary()

        assert [user.user_id for user in report.users] == [2, 1]
        bob, alice = report.users

        assert alice.display == "Alice"
        assert alice.balance == Decimal("42.5")
        assert alice.total_on_stake == Decimal("100")
        assert alice.total_earned == Decimal("530")
        assert alice.total_remaining_cap == Decimal("150")
        assert len(alice.stakes) == 2

        assert bob.display == "@bob"
        assert bob.balance == Decimal("0")
        assert bob.total_remaining_cap == Decimal("0")
        assert bob.stakes[0].max_earning is None

        assert report.stakes_count == 3
        assert report.total_on_stake == Decimal("600")
        service.entry_repo.get_entries_for_report.assert_awaited_once_with(
            active_only=False
        )

    @pytest.mark.asyncio
    async def test_empty_report(self, mock_session):
        service = _service(mock_session, [], {})

        report = await service.build_user_summary(active_only=True)

        assert report.users == []
        assert report.total_balance == Decimal("0")
        assert report.active_only is True


class TestExports:
    """Test JSON and CSV serialization."""

    @pytest.mark.asyncio
    async def test_json_export(self, mock_session, report_entries):
        service = _service(mock_session, report_entries, {})

        payload = json.loads((await service.build_user_summary()).to_json())

        assert payload["totals"]["users"] == 2
        assert payload["totals"]["stakes"] == 3
        assert Decimal(payload["totals"]["total_on_stake"]) == Decimal("600")
        assert payload["users"][0]["stakes"][0]["package_name"] == "Gold Node"

    @pytest.mark.asyncio
    async def test_csv_export(self, mock_session, report_entries):
        service = _service(mock_session, report_entries, {})

        rows = list(csv.reader(io.StringIO((await service.build_user_summary()).to_csv())))

        assert rows[0][0] == "user_id"
        assert rows[0][-1] == "stakes_count"
        assert len(rows) == 3
        assert rows[1][:2] == ["2", "@bob"]
        assert rows[1][5] == "500.00000000"
        assert rows[2][-1] == "2"
