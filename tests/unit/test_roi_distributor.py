"""
Tests for the ROI distributor.

Repositories are replaced with mocks over in-memory entries and balances;
sessions come from a fake session maker.

Tests cover:
- Per-user settlement and balance update
- Promotional (voucher) yield excluded from the ordinary counter
- Failure isolation between users
- Zeroed no-op and already-distributed runs
- Emergency stop
"""

from contextlib import ExitStack
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.config.settings import settings
from app.models.enums import DistributionKind, StakingStatus, TransactionType
from app.services.staking.roi_distributor import RoiDistributor


MODULE = "app.services.staking.roi_distributor"
RUN_DATE = date(2026, 3, 1)


class FakeStore:
    """In-memory entries, balances and voucher links behind mocked repos."""

    def __init__(self, entries, balances, voucher_stake_ids=(), run=None):
        self.entries = entries
        self.balances = {balance.user_id: balance for balance in balances}
        self.voucher_stake_ids = set(voucher_stake_ids)

        self.entry_repo = MagicMock()
        self.entry_repo.get_active_entries = AsyncMock(side_effect=self._active)
        self.entry_repo.get_active_by_ids = AsyncMock(side_effect=self._by_ids)

        self.balance_repo = MagicMock()
        self.balance_repo.get_for_update = AsyncMock(
            side_effect=lambda user_id: self.balances.get(user_id)
        )

        self.voucher_repo = MagicMock()
        self.voucher_repo.get_voucher_stake_ids = AsyncMock(
            side_effect=lambda ids: self.voucher_stake_ids & set(ids)
        )

        self.transaction_repo = MagicMock()
        self.transaction_repo.record = AsyncMock()

        self.ledger_repo = MagicMock()
        self.ledger_repo.replace_for_user = AsyncMock()

        self.run_repo = MagicMock()
        self.run_repo.get_run = AsyncMock(return_value=run)
        self.run_repo.record_run = AsyncMock()

    async def _active(self, user_id=None, for_update=False):
        return [
            entry for entry in self.entries
            if entry.is_active and (user_id is None or entry.user_id == user_id)
        ]

    async def _by_ids(self, ids, for_update=True):
        return [entry for entry in self.entries if entry.id in ids and entry.is_active]

    def patches(self):
        stack = ExitStack()
        stack.enter_context(patch(f"{MODULE}.StakingEntryRepository", return_value=self.entry_repo))
        stack.enter_context(patch(f"{MODULE}.UserBalanceRepository", return_value=self.balance_repo))
        stack.enter_context(patch(f"{MODULE}.VoucherRepository", return_value=self.voucher_repo))
        stack.enter_context(
            patch(f"{MODULE}.TransactionRecordRepository", return_value=self.transaction_repo)
        )
        stack.enter_context(patch(f"{MODULE}.OrdinaryYieldRepository", return_value=self.ledger_repo))
        stack.enter_context(
            patch("app.services.staking.run_guard.DistributionRunRepository", return_value=self.run_repo)
        )
        return stack


class TestRoiDistribution:
    """Test distribute_daily_staking_rewards."""

    @pytest.mark.asyncio
    async def test_single_capped_entry_scenario(
        self, session_maker, entry_factory, balance_factory
    ):
        """1000 at 2%, cap 200, earned 190: pays 10, completes, releases 1000."""
        entry = entry_factory(
            user_id=1, amount="1000", daily_roi="2", max_earning="200", total_earned="190"
        )
        balance = balance_factory(user_id=1, balance="5", on_staking="1000")
        store = FakeStore([entry], [balance])

        with store.patches():
            summary = await RoiDistributor(session_maker).distribute_daily_staking_rewards(
                run_date=RUN_DATE
            )

        assert summary.total_users == 1
        assert summary.total_entries == 1
        assert summary.total_rewarded == Decimal("10")
        assert summary.failed_users == []

        result = summary.results[0]
        assert result.ordinary_rewarded == Decimal("10")
        assert result.on_staking_released == Decimal("1000")
        assert result.missed == Decimal("10")
        assert result.entries[0].reached_cap is True

        assert entry.status == StakingStatus.COMPLETED.value
        assert balance.balance == Decimal("15")
        assert balance.on_staking == Decimal("0")
        assert balance.daily_earning == Decimal("10")
        assert balance.latest_earning == Decimal("10")
        assert balance.missed_earnings == Decimal("10")

        store.transaction_repo.record.assert_awaited_once()
        kwargs = store.transaction_repo.record.await_args.kwargs
        assert kwargs["type"] == TransactionType.DAILY_REWARD
        assert kwargs["description"] == "Daily ROI for Gold Node"
        store.ledger_repo.replace_for_user.assert_awaited_once_with(
            RUN_DATE, 1, Decimal("10")
        )

    @pytest.mark.asyncio
    async def test_promotional_yield_excluded_from_daily_earning(
        self, session_maker, entry_factory, balance_factory
    ):
        """A user whose only entries are voucher stakes has no ordinary yield."""
        voucher_entry = entry_factory(
            user_id=2, amount="100", daily_roi="1", max_earning=None
        )
        balance = balance_factory(user_id=2, daily_earning="99")
        store = FakeStore([voucher_entry], [balance], voucher_stake_ids=[voucher_entry.id])

        with store.patches():
            summary = await RoiDistributor(session_maker).distribute_daily_staking_rewards(
                run_date=RUN_DATE
            )

        result = summary.results[0]
        assert result.promotional_rewarded == Decimal("1")
        assert result.ordinary_rewarded == Decimal("0")
        assert balance.balance == Decimal("1")
        assert balance.daily_earning == Decimal("0")
        store.ledger_repo.replace_for_user.assert_awaited_once_with(
            RUN_DATE, 2, Decimal("0")
        )

    @pytest.mark.asyncio
    async def test_uncapped_entry_never_completes_or_misses(
        self, session_maker, entry_factory, balance_factory
    ):
        entry = entry_factory(user_id=3, max_earning=None, total_earned="100000")
        balance = balance_factory(user_id=3)
        store = FakeStore([entry], [balance])

        with store.patches():
            await RoiDistributor(session_maker).distribute_daily_staking_rewards(
                run_date=RUN_DATE
            )

        assert entry.status == StakingStatus.ACTIVE.value
        assert balance.missed_earnings == Decimal("0")
        assert balance.daily_earning == Decimal("20")

    @pytest.mark.asyncio
    async def test_missing_balance_fails_only_that_user(
        self, session_maker, entry_factory, balance_factory
    ):
        broken = entry_factory(user_id=10)
        healthy = entry_factory(user_id=11)
        balance = balance_factory(user_id=11)
        store = FakeStore([broken, healthy], [balance])

        with store.patches():
            summary = await RoiDistributor(session_maker).distribute_daily_staking_rewards(
                run_date=RUN_DATE
            )

        assert summary.failed_users == [10]
        assert [result.user_id for result in summary.results] == [11]
        assert summary.total_rewarded == Decimal("20")
        assert balance.balance == Decimal("20")

        store.run_repo.record_run.assert_awaited_once()
        kwargs = store.run_repo.record_run.await_args.kwargs
        assert kwargs["kind"] == DistributionKind.ROI
        assert kwargs["units_processed"] == 1
        assert kwargs["units_failed"] == 1

    @pytest.mark.asyncio
    async def test_no_active_entries_returns_zeroed_summary(self, session_maker):
        store = FakeStore([], [])

        with store.patches():
            summary = await RoiDistributor(session_maker).distribute_daily_staking_rewards(
                run_date=RUN_DATE
            )

        assert summary.total_users == 0
        assert summary.total_entries == 0
        assert summary.total_rewarded == Decimal("0")
        assert summary.results == []
        assert session_maker.commits == 0
        store.run_repo.record_run.assert_not_awaited()
        store.transaction_repo.record.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_already_distributed_date_is_skipped(
        self, session_maker, entry_factory, balance_factory
    ):
        entry = entry_factory(user_id=1)
        store = FakeStore([entry], [balance_factory(user_id=1)], run=MagicMock(status="completed"))

        with store.patches():
            summary = await RoiDistributor(session_maker).distribute_daily_staking_rewards(
                run_date=RUN_DATE
            )

        assert summary.already_distributed is True
        assert summary.total_rewarded == Decimal("0")
        assert entry.total_earned == Decimal("0")
        store.entry_repo.get_active_entries.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_user_scoped_run_bypasses_registry(
        self, session_maker, entry_factory, balance_factory
    ):
        mine = entry_factory(user_id=1)
        other = entry_factory(user_id=2)
        store = FakeStore(
            [mine, other],
            [balance_factory(user_id=1), balance_factory(user_id=2)],
            run=MagicMock(status="completed"),
        )

        with store.patches():
            summary = await RoiDistributor(session_maker).distribute_daily_staking_rewards(
                user_id=1, run_date=RUN_DATE
            )

        assert summary.total_users == 1
        assert [result.user_id for result in summary.results] == [1]
        assert other.total_earned == Decimal("0")
        store.run_repo.get_run.assert_not_awaited()
        store.run_repo.record_run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_entries_settle_oldest_first(
        self, session_maker, entry_factory, balance_factory
    ):
        first = entry_factory(user_id=5, package_name="Trial Node")
        second = entry_factory(user_id=5, package_name=None)
        store = FakeStore([first, second], [balance_factory(user_id=5)])

        with store.patches():
            summary = await RoiDistributor(session_maker).distribute_daily_staking_rewards(
                run_date=RUN_DATE
            )

        entry_ids = [item.entry_id for item in summary.results[0].entries]
        assert entry_ids == [first.id, second.id]
        descriptions = [
            call.kwargs["description"] for call in store.transaction_repo.record.await_args_list
        ]
        assert descriptions == ["Daily ROI for Trial Node", "Daily ROI for staking package"]

    @pytest.mark.asyncio
    async def test_emergency_stop_blocks_run(self, session_maker, entry_factory):
        store = FakeStore([entry_factory(user_id=1)], [])

        with store.patches(), patch.object(settings, "emergency_stop_roi", True):
            summary = await RoiDistributor(session_maker).distribute_daily_staking_rewards(
                run_date=RUN_DATE
            )

        assert summary.total_users == 0
        assert session_maker.sessions == []


class TestRoiSummaryCounts:
    """Summary counts cover paying users and entries only."""

    @pytest.mark.asyncio
    async def test_counts_only_paid_entries_and_rewarded_users(
        self, session_maker, entry_factory, balance_factory
    ):
        paying = entry_factory(user_id=1, amount="1000", daily_roi="2")
        exhausted = entry_factory(
            user_id=1, amount="500", max_earning="100", total_earned="100"
        )
        idle = entry_factory(user_id=2, amount="1000", daily_roi="0")
        store = FakeStore(
            [paying, exhausted, idle],
            [balance_factory(user_id=1, on_staking="1500"), balance_factory(user_id=2)],
        )

        with store.patches():
            summary = await RoiDistributor(session_maker).distribute_daily_staking_rewards(
                run_date=RUN_DATE
            )

        assert summary.total_users == 1
        assert summary.total_entries == 1
        assert [result.user_id for result in summary.results] == [1]
        assert summary.results[0].on_staking_released == Decimal("500")
        assert exhausted.status == StakingStatus.COMPLETED.value

        kwargs = store.run_repo.record_run.await_args.kwargs
        assert kwargs["units_processed"] == 2
