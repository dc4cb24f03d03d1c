"""
Business logic constants for the staking reward engine.

Central location for business rules and constants used across the application.
This module can be imported by services, jobs and scripts without circular
dependencies.
"""

from decimal import Decimal


# Team earning rates by sponsor level (1 = direct sponsor)
TEAM_LEVEL_RATES: dict[int, Decimal] = {
    1: Decimal("0.10"),  # 10% for level 1 (direct sponsor)
    2: Decimal("0.05"),  # 5% for level 2
    3: Decimal("0.03"),  # 3% for level 3
    4: Decimal("0.02"),  # 2% for level 4
    5: Decimal("0.01"),  # 1% for level 5
    6: Decimal("0.01"),  # 1% for level 6
}

# Maximum sponsor hops walked for team earnings
TEAM_DEPTH = len(TEAM_LEVEL_RATES)

# Ledger precision (matches DECIMAL(18, 8) columns)
MONEY_QUANT = Decimal("0.00000001")

# Default ledger currency
DEFAULT_CURRENCY = "USDT"

# Description templates for ledger rows
DAILY_REWARD_DESCRIPTION = "Daily ROI for {package_name}"
TEAM_EARNING_DESCRIPTION = "Team earning from {contributors} downline member(s)"
DEFAULT_PACKAGE_NAME = "staking package"
UNKNOWN_PACKAGE_NAME = "Unknown package"
VOUCHER_PACKAGE_NAME = "Voucher Position"
STAKE_DESCRIPTION = "Stake opened for {package_name}"
VOUCHER_STAKE_DESCRIPTION = "Voucher redeemed for {package_name} package"


def get_team_rate(level: int) -> Decimal:
    """
    Get team earning rate for a sponsor level.

    Args:
        level: Sponsor level (1-6)

    Returns:
        Rate as a fraction, 0 for unconfigured levels
    """
    return TEAM_LEVEL_RATES.get(level, Decimal("0"))
