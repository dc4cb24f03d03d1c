"""
Staking report service.

Per-user staking summary: amount on stake, lifetime earnings and the cap
room left, with a per-stake breakdown. Exportable as JSON and CSV.
"""

from __future__ import annotations

import csv
import io
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import UNKNOWN_PACKAGE_NAME
from app.repositories.staking_entry_repository import StakingEntryRepository
from app.repositories.user_balance_repository import UserBalanceRepository
from app.services.base_service import BaseService, log_operation
from app.utils.datetime_utils import utc_now


@dataclass
class StakeSummaryDTO:
    """One stake in the user summary."""
    id: int
    package_name: str
    package_id: int | None
    amount: Decimal
    status: str
    total_earned: Decimal
    max_earning: Decimal | None
    remaining_cap: Decimal
    created_at: datetime


@dataclass
class UserStakingSummaryDTO:
    """Per-user staking totals."""
    user_id: int
    display: str
    name: str | None
    username: str | None
    balance: Decimal = Decimal("0")
    total_on_stake: Decimal = Decimal("0")
    total_earned: Decimal = Decimal("0")
    total_remaining_cap: Decimal = Decimal("0")
    stakes: list[StakeSummaryDTO] = field(default_factory=list)


@dataclass
class StakingSummaryReport:
    """Full staking user summary."""
    generated_at: datetime
    active_only: bool
    users: list[UserStakingSummaryDTO]
    stakes_count: int

    @property
    def total_balance(self) -> Decimal:
        return sum((u.balance for u in self.users), Decimal("0"))

    @property
    def total_on_stake(self) -> Decimal:
        return sum((u.total_on_stake for u in self.users), Decimal("0"))

    @property
    def total_earned(self) -> Decimal:
        return sum((u.total_earned for u in self.users), Decimal("0"))

    @property
    def total_remaining_cap(self) -> Decimal:
        return sum((u.total_remaining_cap for u in self.users), Decimal("0"))

    def to_json(self) -> str:
        """Serialize the report with totals and per-stake breakdown."""
        payload = {
            "generated_at": self.generated_at,
            "filters": {
                "active_only": self.active_only,
                "on_stake_definition": "active stakes",
            },
            "totals": {
                "users": len(self.users),
                "stakes": self.stakes_count,
                "total_balance": self.total_balance,
                "total_on_stake": self.total_on_stake,
                "total_earned": self.total_earned,
                "total_remaining_cap": self.total_remaining_cap,
            },
            "users": [asdict(user) for user in self.users],
        }
        return json.dumps(payload, indent=2, default=_json_default)

    def to_csv(self) -> str:
        """Serialize per-user totals as CSV."""
        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow([
            "user_id", "display", "name", "username", "balance",
            "total_on_stake", "total_earned", "total_remaining_cap",
            "stakes_count",
        ])

        for user in self.users:
            writer.writerow([
                user.user_id,
                user.display,
                user.name or "",
                user.username or "",
                f"{user.balance:.8f}",
                f"{user.total_on_stake:.8f}",
                f"{user.total_earned:.8f}",
                f"{user.total_remaining_cap:.8f}",
                len(user.stakes),
            ])

        return output.getvalue()


def _json_default(value: object) -> str:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class StakingReportService(BaseService):
    """Staking summary reporting."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize staking report service."""
        super().__init__(session)
        self.entry_repo = StakingEntryRepository(session)
        self.balance_repo = UserBalanceRepository(session)

    @log_operation
    async def build_user_summary(
        self, active_only: bool = False
    ) -> StakingSummaryReport:
        """
        Build the per-user staking summary.

        Only active stakes count towards ``total_on_stake``, even when all
        stakes are listed. Uncapped stakes add no remaining cap.

        Args:
            active_only: Only include active stakes

        Returns:
            Report with users sorted by amount on stake, largest first
        """
        entries = await self.entry_repo.get_entries_for_report(
            active_only=active_only
        )
        balances = await self.balance_repo.get_many(
            {entry.user_id for entry in entries}
        )

        by_user: dict[int, UserStakingSummaryDTO] = {}
        for entry in entries:
            summary = by_user.get(entry.user_id)
            if summary is None:
                user = entry.user
                balance = balances.get(entry.user_id)
                summary = by_user[entry.user_id] = UserStakingSummaryDTO(
                    user_id=entry.user_id,
                    display=user.display_name if user else str(entry.user_id),
                    name=user.name if user else None,
                    username=user.username if user else None,
                    balance=balance.balance if balance else Decimal("0"),
                )

            earned = entry.total_earned or Decimal("0")
            remaining = entry.remaining_cap or Decimal("0")

            if entry.is_active:
                summary.total_on_stake += entry.amount
            summary.total_earned += earned
            summary.total_remaining_cap += remaining
            summary.stakes.append(
                StakeSummaryDTO(
                    id=entry.id,
                    package_name=entry.package_name or UNKNOWN_PACKAGE_NAME,
                    package_id=entry.package_id,
                    amount=entry.amount,
                    status=entry.status,
                    total_earned=earned,
                    max_earning=entry.max_earning,
                    remaining_cap=remaining,
                    created_at=entry.created_at,
                )
            )

        users = sorted(
            by_user.values(), key=lambda u: u.total_on_stake, reverse=True
        )
        return StakingSummaryReport(
            generated_at=utc_now(),
            active_only=active_only,
            users=users,
            stakes_count=len(entries),
        )
