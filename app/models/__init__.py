"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.base import Base

# Core Models
from app.models.user import User
from app.models.user_balance import UserBalance

# Staking Models
from app.models.earning_cap import UNCAPPED, Capped, EarningCap, Uncapped
from app.models.staking_entry import StakingEntry
from app.models.voucher import Voucher

# Referral Models
from app.models.invited_member import InvitedMember
from app.models.team_earning_record import TeamEarningRecord

# Ledger Models
from app.models.distribution_run import DistributionRun
from app.models.ordinary_yield_ledger import OrdinaryYieldLedger
from app.models.transaction_record import TransactionRecord

from app.models.enums import (
    DistributionKind,
    DistributionRunStatus,
    StakingStatus,
    TransactionStatus,
    TransactionType,
    VoucherStatus,
)

__all__ = [
    "Base",
    "User",
    "UserBalance",
    "StakingEntry",
    "Voucher",
    "InvitedMember",
    "TeamEarningRecord",
    "TransactionRecord",
    "OrdinaryYieldLedger",
    "DistributionRun",
    "Capped",
    "Uncapped",
    "UNCAPPED",
    "EarningCap",
    "DistributionKind",
    "DistributionRunStatus",
    "StakingStatus",
    "TransactionStatus",
    "TransactionType",
    "VoucherStatus",
]
