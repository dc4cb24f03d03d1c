"""
Staking package catalog.

Single source of truth for the staking tiers: fixed principal, daily ROI
and cap multiplier. Other modules must import package data from here.
"""

from decimal import Decimal
from typing import NamedTuple


class StakingPackage(NamedTuple):
    """Staking package configuration."""

    id: int
    name: str
    amount: Decimal  # Fixed principal in USDT
    roi: Decimal  # Daily ROI percent (0.8 = 0.8%)
    cap: Decimal  # Max earning multiplier (1.5 = 150% of principal)
    visible: bool = True  # Hidden packages stay valid for existing stakes


STAKING_PACKAGES: list[StakingPackage] = [
    StakingPackage(0, "Trial Node", Decimal("10"), Decimal("0.8"), Decimal("1.5")),
    StakingPackage(1, "Bronze Node", Decimal("100"), Decimal("1.0"), Decimal("1.8")),
    # Hidden from UI, kept for backward compatibility
    StakingPackage(
        2, "Silver Node", Decimal("250"), Decimal("1.1"), Decimal("2.0"), visible=False
    ),
    StakingPackage(3, "Gold Node", Decimal("250"), Decimal("1.1"), Decimal("2.0")),
    StakingPackage(4, "Platinum Node", Decimal("500"), Decimal("1.2"), Decimal("2.3")),
    StakingPackage(5, "Diamond Node", Decimal("2000"), Decimal("1.4"), Decimal("3.0")),
    StakingPackage(6, "Titan Node", Decimal("5000"), Decimal("1.5"), Decimal("3.5")),
    StakingPackage(7, "Crown Node", Decimal("10000"), Decimal("1.6"), Decimal("4.0")),
    StakingPackage(8, "Elysium Vault", Decimal("25000"), Decimal("1.7"), Decimal("5.0")),
]

STAKING_PACKAGES_BY_ID: dict[int, StakingPackage] = {
    package.id: package for package in STAKING_PACKAGES
}


def get_package(package_id: int) -> StakingPackage | None:
    """
    Get package by id.

    Args:
        package_id: Catalog id

    Returns:
        Package or None if unknown
    """
    return STAKING_PACKAGES_BY_ID.get(package_id)


def get_visible_packages() -> list[StakingPackage]:
    """Packages offered for purchase."""
    return [package for package in STAKING_PACKAGES if package.visible]


def find_package_for_amount(amount: Decimal) -> StakingPackage | None:
    """
    Find the visible package whose fixed amount matches exactly.

    Hidden packages are skipped so that a shared amount (Silver/Gold)
    resolves to the package currently sold.

    Args:
        amount: Subscription amount

    Returns:
        Matching package or None
    """
    for package in get_visible_packages():
        if package.amount == amount:
            return package
    return None


def calculate_daily_earning(amount: Decimal, roi: Decimal) -> Decimal:
    """
    Calculate daily earning for a stake.

    Formula: amount * roi / 100
    """
    return amount * roi / 100


def calculate_max_earning(amount: Decimal, cap: Decimal) -> Decimal:
    """
    Calculate lifetime earning cap for a stake.

    Formula: amount * cap
    """
    return amount * cap


def is_cap_reached(total_earned: Decimal, max_earning: Decimal) -> bool:
    """Check if a stake has reached its cap."""
    return total_earned >= max_earning
