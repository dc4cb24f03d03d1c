"""
Stake settlement calculator.

Pure settlement rules shared by the ROI and team earnings distributors:
daily yield against an entry's lifetime cap, placement of a team reward
into a sponsor's entries, and slicing of the credited amount across the
contributions that produced it.

Functions here mutate the ORM entries they are given but never touch the
session. Persistence is the caller's job.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_DOWN, Decimal

from app.config.business_constants import MONEY_QUANT
from app.models.earning_cap import Capped, Uncapped
from app.models.enums import StakingStatus
from app.models.staking_entry import StakingEntry
from app.utils.datetime_utils import utc_now


ZERO = Decimal("0")


def quantize_money(amount: Decimal) -> Decimal:
    """
    Round an amount down to ledger precision (8 places).

    Rounding down keeps a payout from ever exceeding a remaining cap.
    """
    return Decimal(amount).quantize(MONEY_QUANT, rounding=ROUND_DOWN)


def calculate_raw_yield(entry: StakingEntry) -> Decimal:
    """
    Calculate today's uncapped yield for an entry.

    Formula: amount * daily_roi / 100
    """
    return quantize_money(entry.amount * entry.daily_roi / 100)


@dataclass
class EntrySettlement:
    """Outcome of settling one entry for one day."""

    entry_id: int
    package_name: str | None
    payout: Decimal = ZERO
    missed: Decimal = ZERO
    released: Decimal = ZERO
    reached_cap: bool = False
    promotional: bool = False


@dataclass
class TeamPlacement:
    """Outcome of placing a team reward into a sponsor's entries."""

    credited: Decimal = ZERO
    missed: Decimal = ZERO
    released: Decimal = ZERO
    entries_updated: int = 0
    completed_entry_ids: list[int] = field(default_factory=list)


def complete_entry(entry: StakingEntry, now: datetime | None = None) -> Decimal:
    """
    Mark an entry completed and release its principal.

    Args:
        entry: Entry that reached its cap
        now: Completion time

    Returns:
        Released principal, 0 when the entry was already completed
    """
    if entry.status == StakingStatus.COMPLETED.value:
        return ZERO

    entry.status = StakingStatus.COMPLETED.value
    entry.end_date = now or utc_now()
    return entry.amount


def settle_daily_yield(
    entry: StakingEntry,
    promotional: bool = False,
    now: datetime | None = None,
) -> EntrySettlement:
    """
    Apply one day of yield to an entry.

    Uncapped entries are paid the raw yield in full and never complete.
    Capped entries are paid up to their remaining cap; the overflow is
    reported as missed. An entry already at its cap is completed and its
    principal released without a payout.

    Args:
        entry: Active staking entry (mutated in place)
        promotional: Entry was created from a redeemed voucher
        now: Settlement time

    Returns:
        EntrySettlement describing the payout
    """
    result = EntrySettlement(
        entry_id=entry.id,
        package_name=entry.package_name,
        promotional=promotional,
    )
    earned = entry.total_earned or ZERO
    raw_yield = calculate_raw_yield(entry)
    cap = entry.earning_cap

    if isinstance(cap, Uncapped):
        if raw_yield > 0:
            entry.total_earned = earned + raw_yield
            result.payout = raw_yield
        return result

    if not isinstance(cap, Capped):
        raise TypeError(f"Unsupported earning cap: {cap!r}")

    remaining = cap.remaining(earned)
    if remaining <= 0:
        result.released = complete_entry(entry, now)
        result.reached_cap = True
        return result

    payout = min(raw_yield, remaining)
    if payout <= 0:
        return result

    result.payout = payout
    result.missed = raw_yield - payout
    entry.total_earned = earned + payout

    if cap.is_reached(entry.total_earned):
        result.released = complete_entry(entry, now)
        result.reached_cap = True
    return result


def place_team_reward(
    entries: list[StakingEntry],
    reward: Decimal,
    now: datetime | None = None,
) -> TeamPlacement:
    """
    Place a sponsor's team reward into their own active entries.

    Entries are filled oldest first. Uncapped entries and entries with no
    room left absorb nothing. Whatever cannot be placed is missed.

    Args:
        entries: Sponsor's active entries, ordered by creation time
        reward: Pending team reward
        now: Settlement time

    Returns:
        TeamPlacement with credited, missed and released amounts
    """
    placement = TeamPlacement()
    left = reward

    for entry in entries:
        if left <= 0:
            break

        cap = entry.earning_cap
        if not isinstance(cap, Capped):
            continue

        earned = entry.total_earned or ZERO
        remaining = cap.remaining(earned)
        if remaining <= 0:
            continue

        credit = min(left, remaining)
        entry.total_earned = earned + credit
        placement.credited += credit
        placement.entries_updated += 1
        left -= credit

        if cap.is_reached(entry.total_earned):
            released = complete_entry(entry, now)
            if released:
                placement.released += released
                placement.completed_entry_ids.append(entry.id)

    placement.missed = max(left, ZERO)
    return placement


def slice_contributions(
    contributions: list[tuple[int, int, Decimal]],
    credited: Decimal,
) -> list[tuple[int, int, Decimal]]:
    """
    Split a credited amount across the contributions that produced it.

    Earliest-recorded contribution first: each one takes up to its full
    amount until the credited total runs out. Contributions that are not
    covered are dropped.

    Args:
        contributions: (source_user_id, level, amount) in insertion order
        credited: Amount actually credited to the sponsor

    Returns:
        (source_user_id, level, amount) slices with amount > 0
    """
    slices: list[tuple[int, int, Decimal]] = []
    left = credited

    for source_user_id, level, amount in contributions:
        if left <= 0:
            break
        portion = min(amount, left)
        if portion > 0:
            slices.append((source_user_id, level, portion))
            left -= portion

    return slices
