"""
Team earnings distributor.

Pays sponsors up to six levels up a share of each downline user's ordinary
yield for the run date. Rewards are placed into the sponsor's own active
entries and clamped by their remaining caps. Each sponsor is settled in its
own transaction.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from functools import partial

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import TEAM_EARNING_DESCRIPTION
from app.config.database import async_session_maker
from app.config.settings import settings
from app.models.enums import DistributionKind, TransactionType
from app.repositories.invited_member_repository import InvitedMemberRepository
from app.repositories.ordinary_yield_repository import OrdinaryYieldRepository
from app.repositories.staking_entry_repository import StakingEntryRepository
from app.repositories.team_earning_repository import TeamEarningRepository
from app.repositories.transaction_record_repository import (
    TransactionRecordRepository,
)
from app.repositories.user_balance_repository import UserBalanceRepository
from app.services.staking.run_guard import (
    ensure_not_blocked,
    is_already_distributed,
    record_run,
)
from app.services.staking.settlement import (
    ZERO,
    place_team_reward,
    slice_contributions,
)
from app.services.staking.sponsor_chain import (
    SponsorReward,
    accumulate_team_rewards,
)
from app.services.staking.unit_of_work import SessionMaker, UnitOfWorkRunner
from app.utils.datetime_utils import utc_now, utc_today
from app.utils.exceptions import DistributionBlockedError


@dataclass
class SponsorSettlement:
    """Outcome of settling one sponsor."""

    sponsor_id: int
    credited: Decimal = ZERO
    missed: Decimal = ZERO
    released: Decimal = ZERO
    entries_updated: int = 0
    records_logged: int = 0


@dataclass
class TeamDistributionSummary:
    """Result of a team earnings distribution run."""

    rewarded_users: int = 0
    total_rewarded: Decimal = ZERO
    total_missed: Decimal = ZERO
    total_entries_updated: int = 0
    records_logged: int = 0
    failed_users: list[int] = field(default_factory=list)
    already_distributed: bool = False

    def to_dict(self) -> dict:
        """Serialize for logs and task results."""
        return {
            "rewarded_users": self.rewarded_users,
            "total_rewarded": str(self.total_rewarded),
            "total_missed": str(self.total_missed),
            "total_entries_updated": self.total_entries_updated,
            "records_logged": self.records_logged,
            "failed_users": list(self.failed_users),
            "already_distributed": self.already_distributed,
        }


class TeamEarningsDistributor:
    """Multi-level team earnings distribution."""

    def __init__(
        self,
        session_maker: SessionMaker = async_session_maker,
        currency: str | None = None,
    ) -> None:
        """
        Initialize team earnings distributor.

        Args:
            session_maker: Factory for per-unit sessions
            currency: Ledger currency for transaction records
        """
        self.session_maker = session_maker
        self.currency = currency or settings.default_currency

    async def distribute_team_earnings(
        self, run_date: date | None = None
    ) -> TeamDistributionSummary:
        """
        Distribute team earnings for a run date.

        Earners are read from the ordinary yield ledger written by the ROI
        run for the same date. A date that was already distributed returns
        a zeroed summary flagged ``already_distributed``.

        Args:
            run_date: Distribution date (defaults to today, UTC)

        Returns:
            TeamDistributionSummary
        """
        run_date = run_date or utc_today()
        summary = TeamDistributionSummary()

        try:
            ensure_not_blocked(DistributionKind.TEAM)
        except DistributionBlockedError as e:
            logger.warning(f"Team earnings distribution skipped: {e}")
            return summary

        if await is_already_distributed(
            self.session_maker, DistributionKind.TEAM, run_date
        ):
            summary.already_distributed = True
            return summary

        async with self.session_maker() as session:
            earners = await OrdinaryYieldRepository(session).get_earners(run_date)
            if not earners:
                logger.info(
                    "No ordinary yield recorded, nothing to distribute",
                    extra={"run_date": run_date.isoformat()},
                )
                return summary
            sponsor_map = await InvitedMemberRepository(session).get_sponsor_map()

        rewards = accumulate_team_rewards(earners, sponsor_map)

        logger.info(
            f"Starting team earnings distribution: {len(earners)} earners, "
            f"{len(rewards)} sponsors",
            extra={"run_date": run_date.isoformat()},
        )

        runner = UnitOfWorkRunner(self.session_maker, "sponsor")

        for sponsor_id, reward in rewards.items():
            if reward.total_amount <= 0:
                continue

            result = await runner.run(
                sponsor_id,
                partial(self._settle_sponsor, reward=reward, run_date=run_date),
            )
            if result is None:
                continue

            summary.total_rewarded += result.credited
            summary.total_missed += result.missed
            summary.total_entries_updated += result.entries_updated
            summary.records_logged += result.records_logged
            if result.credited > 0 or result.missed > 0:
                summary.rewarded_users += 1

        summary.failed_users = runner.failed_ids

        if rewards:
            await record_run(
                self.session_maker,
                DistributionKind.TEAM,
                run_date,
                units_processed=len(rewards) - len(summary.failed_users),
                units_failed=len(summary.failed_users),
                total_rewarded=summary.total_rewarded,
                total_missed=summary.total_missed,
            )

        logger.info(
            f"Team earnings distribution complete: {summary.total_rewarded} "
            f"{self.currency} to {summary.rewarded_users} sponsors",
            extra=summary.to_dict(),
        )
        return summary

    async def _settle_sponsor(
        self,
        session: AsyncSession,
        reward: SponsorReward,
        run_date: date,
    ) -> SponsorSettlement:
        """Apply one sponsor's pending reward inside the current transaction."""
        sponsor_id = reward.sponsor_id
        result = SponsorSettlement(sponsor_id=sponsor_id)

        balance = await UserBalanceRepository(session).get_for_update(sponsor_id)
        if balance is None:
            logger.warning(
                f"Sponsor {sponsor_id} has no balance record, team reward missed",
                extra={
                    "sponsor_id": sponsor_id,
                    "amount": str(reward.total_amount),
                },
            )
            result.missed = reward.total_amount
            return result

        entries = await StakingEntryRepository(session).get_active_entries(
            user_id=sponsor_id, for_update=True
        )
        placement = place_team_reward(entries, reward.total_amount, now=utc_now())

        result.credited = placement.credited
        result.missed = placement.missed
        result.released = placement.released
        result.entries_updated = placement.entries_updated

        if placement.credited or placement.released or placement.missed:
            balance.balance += placement.credited
            balance.team_earning += placement.credited
            balance.on_staking -= placement.released
            balance.missed_earnings += placement.missed

        if placement.credited > 0:
            slices = slice_contributions(reward.contributions, placement.credited)
            result.records_logged = await TeamEarningRepository(session).add_records(
                sponsor_id, slices, run_date=run_date
            )
            await TransactionRecordRepository(session).record(
                user_id=sponsor_id,
                type=TransactionType.TEAM_EARNING,
                amount=placement.credited,
                currency=self.currency,
                description=TEAM_EARNING_DESCRIPTION.format(
                    contributors=len({source for source, _, _ in slices})
                ),
            )

        logger.debug(
            f"Settled team reward for sponsor {sponsor_id}",
            extra={
                "sponsor_id": sponsor_id,
                "pending": str(reward.total_amount),
                "credited": str(placement.credited),
                "missed": str(placement.missed),
                "released": str(placement.released),
            },
        )
        return result
