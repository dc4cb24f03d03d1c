"""
ROI distributor.

Pays every active staking entry its daily yield, clamped to the entry's
lifetime cap. Each user is settled in its own transaction so that one
failing user does not roll back the others.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from functools import partial

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import (
    DAILY_REWARD_DESCRIPTION,
    DEFAULT_PACKAGE_NAME,
)
from app.config.database import async_session_maker
from app.config.settings import settings
from app.models.enums import DistributionKind, TransactionType
from app.repositories.ordinary_yield_repository import OrdinaryYieldRepository
from app.repositories.staking_entry_repository import StakingEntryRepository
from app.repositories.transaction_record_repository import (
    TransactionRecordRepository,
)
from app.repositories.user_balance_repository import UserBalanceRepository
from app.repositories.voucher_repository import VoucherRepository
from app.services.staking.run_guard import (
    ensure_not_blocked,
    is_already_distributed,
    record_run,
)
from app.services.staking.settlement import ZERO, settle_daily_yield
from app.services.staking.unit_of_work import SessionMaker, UnitOfWorkRunner
from app.utils.datetime_utils import utc_now, utc_today
from app.utils.exceptions import BalanceNotFoundError, DistributionBlockedError


@dataclass
class EntryDistributionResult:
    """Per-entry payout of one ROI run."""

    entry_id: int
    package_name: str | None
    payout: Decimal
    reached_cap: bool
    promotional: bool


@dataclass
class UserDistributionResult:
    """Per-user aggregate of one ROI run."""

    user_id: int
    total_rewarded: Decimal = ZERO
    ordinary_rewarded: Decimal = ZERO
    promotional_rewarded: Decimal = ZERO
    on_staking_released: Decimal = ZERO
    missed: Decimal = ZERO
    entries: list[EntryDistributionResult] = field(default_factory=list)


@dataclass
class RoiDistributionSummary:
    """Result of an ROI distribution run."""

    # Users in results and entries that paid out
    total_users: int = 0
    total_entries: int = 0
    total_rewarded: Decimal = ZERO
    results: list[UserDistributionResult] = field(default_factory=list)
    failed_users: list[int] = field(default_factory=list)
    already_distributed: bool = False

    def to_dict(self) -> dict:
        """Serialize for logs and task results."""
        return {
            "total_users": self.total_users,
            "total_entries": self.total_entries,
            "total_rewarded": str(self.total_rewarded),
            "rewarded_users": len(self.results),
            "failed_users": list(self.failed_users),
            "already_distributed": self.already_distributed,
        }


class RoiDistributor:
    """Daily ROI distribution over active staking entries."""

    def __init__(
        self,
        session_maker: SessionMaker = async_session_maker,
        currency: str | None = None,
    ) -> None:
        """
        Initialize ROI distributor.

        Args:
            session_maker: Factory for per-unit sessions
            currency: Ledger currency for transaction records
        """
        self.session_maker = session_maker
        self.currency = currency or settings.default_currency

    async def distribute_daily_staking_rewards(
        self,
        user_id: int | None = None,
        run_date: date | None = None,
    ) -> RoiDistributionSummary:
        """
        Distribute one day of ROI.

        A run scoped to ``user_id`` is a targeted re-run and bypasses the
        run registry. A global run for a date that was already distributed
        returns a zeroed summary flagged ``already_distributed``.

        Args:
            user_id: Only settle this user's entries
            run_date: Distribution date (defaults to today, UTC)

        Returns:
            RoiDistributionSummary
        """
        run_date = run_date or utc_today()
        summary = RoiDistributionSummary()

        try:
            ensure_not_blocked(DistributionKind.ROI)
        except DistributionBlockedError as e:
            logger.warning(f"ROI distribution skipped: {e}")
            return summary

        if user_id is None and await is_already_distributed(
            self.session_maker, DistributionKind.ROI, run_date
        ):
            summary.already_distributed = True
            return summary

        entries_by_user = await self._load_active_entry_ids(user_id)
        if not entries_by_user:
            logger.info(
                "No active staking entries to distribute",
                extra={"user_id": user_id, "run_date": run_date.isoformat()},
            )
            return summary

        scanned_users = len(entries_by_user)
        scanned_entries = sum(len(ids) for ids in entries_by_user.values())

        logger.info(
            f"Starting ROI distribution for {scanned_users} users, "
            f"{scanned_entries} entries",
            extra={"run_date": run_date.isoformat(), "user_id": user_id},
        )

        runner = UnitOfWorkRunner(self.session_maker, "user")
        total_missed = ZERO

        for owner_id, entry_ids in entries_by_user.items():
            result = await runner.run(
                owner_id,
                partial(
                    self._settle_user,
                    user_id=owner_id,
                    entry_ids=entry_ids,
                    run_date=run_date,
                ),
            )
            if result is None:
                continue

            summary.total_users += 1
            summary.total_entries += len(result.entries)
            summary.total_rewarded += result.total_rewarded
            total_missed += result.missed
            summary.results.append(result)

        summary.failed_users = runner.failed_ids

        if user_id is None:
            await record_run(
                self.session_maker,
                DistributionKind.ROI,
                run_date,
                units_processed=scanned_users - len(summary.failed_users),
                units_failed=len(summary.failed_users),
                total_rewarded=summary.total_rewarded,
                total_missed=total_missed,
            )

        logger.info(
            f"ROI distribution complete: {summary.total_rewarded} "
            f"{self.currency} to {len(summary.results)} users",
            extra=summary.to_dict(),
        )
        return summary

    async def _load_active_entry_ids(
        self, user_id: int | None
    ) -> dict[int, list[int]]:
        """Group active entry IDs by owner, oldest entry first."""
        async with self.session_maker() as session:
            entries = await StakingEntryRepository(session).get_active_entries(
                user_id=user_id
            )

        entries_by_user: dict[int, list[int]] = {}
        for entry in entries:
            entries_by_user.setdefault(entry.user_id, []).append(entry.id)
        return entries_by_user

    async def _settle_user(
        self,
        session: AsyncSession,
        user_id: int,
        entry_ids: list[int],
        run_date: date,
    ) -> UserDistributionResult | None:
        """
        Settle all active entries of one user inside the current transaction.

        Returns:
            User result, or None when nothing was paid or released
        """
        balance_repo = UserBalanceRepository(session)
        entry_repo = StakingEntryRepository(session)
        voucher_repo = VoucherRepository(session)
        transaction_repo = TransactionRecordRepository(session)

        balance = await balance_repo.get_for_update(user_id)
        if balance is None:
            raise BalanceNotFoundError(user_id)

        balance.daily_earning = ZERO
        balance.latest_earning = ZERO

        entries = await entry_repo.get_active_by_ids(entry_ids)
        voucher_stake_ids = await voucher_repo.get_voucher_stake_ids(
            [entry.id for entry in entries]
        )

        result = UserDistributionResult(user_id=user_id)
        now = utc_now()

        for entry in entries:
            settlement = settle_daily_yield(
                entry,
                promotional=entry.id in voucher_stake_ids,
                now=now,
            )
            result.on_staking_released += settlement.released
            result.missed += settlement.missed

            if settlement.payout <= 0:
                continue

            result.total_rewarded += settlement.payout
            if settlement.promotional:
                result.promotional_rewarded += settlement.payout
            else:
                result.ordinary_rewarded += settlement.payout

            result.entries.append(
                EntryDistributionResult(
                    entry_id=entry.id,
                    package_name=entry.package_name,
                    payout=settlement.payout,
                    reached_cap=settlement.reached_cap,
                    promotional=settlement.promotional,
                )
            )

            await transaction_repo.record(
                user_id=user_id,
                type=TransactionType.DAILY_REWARD,
                amount=settlement.payout,
                currency=entry.currency or self.currency,
                description=DAILY_REWARD_DESCRIPTION.format(
                    package_name=entry.package_name or DEFAULT_PACKAGE_NAME
                ),
                reference_id=entry.id,
            )

        if result.total_rewarded or result.on_staking_released or result.missed:
            balance.balance += result.total_rewarded
            balance.daily_earning += result.ordinary_rewarded
            balance.on_staking -= result.on_staking_released
            balance.missed_earnings += result.missed
            balance.latest_earning = result.total_rewarded

        await OrdinaryYieldRepository(session).replace_for_user(
            run_date, user_id, result.ordinary_rewarded
        )

        logger.debug(
            f"Settled ROI for user {user_id}",
            extra={
                "user_id": user_id,
                "total_rewarded": str(result.total_rewarded),
                "ordinary_rewarded": str(result.ordinary_rewarded),
                "released": str(result.on_staking_released),
                "missed": str(result.missed),
            },
        )

        if result.entries or result.on_staking_released > 0:
            return result
        return None
