"""
Services.

Business logic layer: the service base class and the staking reward engine.
"""

from app.services.base_service import (
    BaseService,
    log_operation,
    transaction,
)
from app.services.staking import (
    RoiDistributor,
    SponsorService,
    StakeService,
    StakingReportService,
    TeamEarningsDistributor,
    run_daily_distribution,
)

__all__ = [
    "BaseService",
    "log_operation",
    "transaction",
    "RoiDistributor",
    "TeamEarningsDistributor",
    "run_daily_distribution",
    "StakeService",
    "SponsorService",
    "StakingReportService",
]
