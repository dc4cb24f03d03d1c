"""
Stake service.

Opens staking entries from the package catalog and from redeemed
promotional vouchers.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import (
    STAKE_DESCRIPTION,
    VOUCHER_PACKAGE_NAME,
    VOUCHER_STAKE_DESCRIPTION,
)
from app.config.settings import settings
from app.config.staking_packages import (
    calculate_max_earning,
    find_package_for_amount,
    get_package,
)
from app.models.enums import StakingStatus, TransactionType, VoucherStatus
from app.models.staking_entry import StakingEntry
from app.repositories.staking_entry_repository import StakingEntryRepository
from app.repositories.transaction_record_repository import (
    TransactionRecordRepository,
)
from app.repositories.user_balance_repository import UserBalanceRepository
from app.repositories.voucher_repository import VoucherRepository
from app.services.base_service import BaseService, transaction
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import BalanceNotFoundError, StakingError


class StakeService(BaseService):
    """Stake opening and voucher redemption."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize stake service."""
        super().__init__(session)
        self.entry_repo = StakingEntryRepository(session)
        self.balance_repo = UserBalanceRepository(session)
        self.voucher_repo = VoucherRepository(session)
        self.transaction_repo = TransactionRecordRepository(session)

    @transaction
    async def open_stake(self, user_id: int, package_id: int) -> StakingEntry:
        """
        Open a stake from a catalog package.

        The package amount moves from the available balance into
        ``on_staking``.

        Args:
            user_id: Staking user
            package_id: Catalog package id

        Returns:
            Created staking entry

        Raises:
            StakingError: Unknown/hidden package or insufficient balance
            BalanceNotFoundError: User has no balance record
        """
        package = get_package(package_id)
        if package is None or not package.visible:
            raise StakingError(f"Package {package_id} is not available")

        balance = await self.balance_repo.get_for_update(user_id)
        if balance is None:
            raise BalanceNotFoundError(user_id)

        if balance.balance < package.amount:
            raise StakingError(
                f"Insufficient balance. Available: {balance.balance:.2f} "
                f"{settings.default_currency}"
            )

        entry = await self.entry_repo.create(
            user_id=user_id,
            package_id=package.id,
            package_name=package.name,
            amount=package.amount,
            daily_roi=package.roi,
            max_earning=calculate_max_earning(package.amount, package.cap),
            total_earned=Decimal("0"),
            status=StakingStatus.ACTIVE.value,
            currency=settings.default_currency,
        )

        balance.balance -= package.amount
        balance.on_staking += package.amount

        await self.transaction_repo.record(
            user_id=user_id,
            type=TransactionType.STAKE,
            amount=package.amount,
            currency=settings.default_currency,
            description=STAKE_DESCRIPTION.format(package_name=package.name),
            reference_id=entry.id,
        )

        self.logger.info(
            "Stake opened",
            extra={
                "user_id": user_id,
                "entry_id": entry.id,
                "package": package.name,
                "amount": str(package.amount),
            },
        )
        return entry

    @transaction
    async def redeem_voucher(
        self,
        user_id: int,
        code: str,
        affects_max_cap: bool = True,
    ) -> StakingEntry:
        """
        Redeem a promotional voucher into a staking entry.

        The voucher value is matched to a catalog package for its ROI. With
        ``affects_max_cap`` the entry gets its own cap; without it the
        entry is uncapped. The value is added to ``on_staking`` without
        touching the available balance.

        Args:
            user_id: Redeeming user
            code: Voucher code
            affects_max_cap: Give the entry a lifetime cap

        Returns:
            Created staking entry

        Raises:
            StakingError: Unknown, used or expired voucher, or no package
                matches its value
            BalanceNotFoundError: User has no balance record
        """
        voucher = await self.voucher_repo.get_by_code_for_update(code)
        if voucher is None:
            raise StakingError(f"Voucher {code} not found")
        if voucher.status != VoucherStatus.UNUSED.value:
            raise StakingError(f"Voucher {code} is {voucher.status}")
        if voucher.user_id is not None and voucher.user_id != user_id:
            raise StakingError(f"Voucher {code} belongs to another user")

        package = find_package_for_amount(voucher.value)
        if package is None:
            raise StakingError(
                f"No staking package matches voucher value {voucher.value}"
            )

        balance = await self.balance_repo.get_for_update(user_id)
        if balance is None:
            raise BalanceNotFoundError(user_id)

        max_earning = (
            calculate_max_earning(voucher.value, package.cap)
            if affects_max_cap
            else None
        )

        entry = await self.entry_repo.create(
            user_id=user_id,
            package_id=package.id,
            package_name=VOUCHER_PACKAGE_NAME,
            amount=voucher.value,
            daily_roi=package.roi,
            max_earning=max_earning,
            total_earned=Decimal("0"),
            status=StakingStatus.ACTIVE.value,
            currency=settings.default_currency,
        )

        voucher.user_id = user_id
        voucher.status = VoucherStatus.USED.value
        voucher.applied_to_stake_id = entry.id
        voucher.used_at = utc_now()

        balance.on_staking += voucher.value

        await self.transaction_repo.record(
            user_id=user_id,
            type=TransactionType.STAKE,
            amount=voucher.value,
            currency=settings.default_currency,
            description=VOUCHER_STAKE_DESCRIPTION.format(package_name=package.name),
            reference_id=entry.id,
        )

        self.logger.info(
            "Voucher redeemed",
            extra={
                "user_id": user_id,
                "voucher_id": voucher.id,
                "entry_id": entry.id,
                "uncapped": max_earning is None,
            },
        )
        return entry
