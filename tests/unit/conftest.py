"""
Shared fixtures for unit tests.

This module provides factories for transient ORM objects used across
test modules:
- staking entries (capped, uncapped, completed)
- user balances
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from itertools import count

import pytest

from app.models import StakingEntry, StakingStatus, UserBalance


_ids = count(1)
_base_time = datetime(2026, 1, 1, tzinfo=UTC)


def build_entry(
    user_id: int = 100,
    amount: str = "1000",
    daily_roi: str = "2",
    max_earning: str | None = "200",
    total_earned: str = "0",
    status: StakingStatus = StakingStatus.ACTIVE,
    entry_id: int | None = None,
    package_name: str | None = "Gold Node",
) -> StakingEntry:
    """Create a transient staking entry with explicit column values."""
    entry_id = entry_id if entry_id is not None else next(_ids)
    return StakingEntry(
        id=entry_id,
        user_id=user_id,
        package_id=3,
        package_name=package_name,
        amount=Decimal(amount),
        daily_roi=Decimal(daily_roi),
        max_earning=Decimal(max_earning) if max_earning is not None else None,
        total_earned=Decimal(total_earned),
        status=status.value,
        currency="USDT",
        created_at=_base_time + timedelta(minutes=entry_id),
    )


def build_balance(
    user_id: int = 100,
    balance: str = "0",
    on_staking: str = "0",
    daily_earning: str = "0",
    latest_earning: str = "0",
    team_earning: str = "0",
    missed_earnings: str = "0",
) -> UserBalance:
    """Create a transient balance record with explicit column values."""
    return UserBalance(
        user_id=user_id,
        balance=Decimal(balance),
        on_staking=Decimal(on_staking),
        daily_earning=Decimal(daily_earning),
        latest_earning=Decimal(latest_earning),
        team_earning=Decimal(team_earning),
        missed_earnings=Decimal(missed_earnings),
    )


@pytest.fixture
def entry_factory():
    """Factory for staking entries."""
    return build_entry


@pytest.fixture
def balance_factory():
    """Factory for user balances."""
    return build_balance
