"""
Model enumerations.

String enums stored in status/type columns of staking models.
"""

from enum import StrEnum


class StakingStatus(StrEnum):
    """Lifecycle status of a staking entry."""

    ACTIVE = "active"
    COMPLETED = "completed"


class VoucherStatus(StrEnum):
    """Voucher redemption status."""

    UNUSED = "unused"
    USED = "used"
    EXPIRED = "expired"


class TransactionType(StrEnum):
    """Ledger transaction types written by the distributors."""

    DAILY_REWARD = "dailyReward"
    TEAM_EARNING = "teamEarning"
    STAKE = "stake"


class TransactionStatus(StrEnum):
    """Ledger transaction status."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class DistributionKind(StrEnum):
    """Kind of batch distribution run."""

    ROI = "roi"
    TEAM = "team"


class DistributionRunStatus(StrEnum):
    """Status of a recorded distribution run."""

    COMPLETED = "completed"
    PARTIAL = "partial"  # Some units failed
