"""
Staking services package.

This package provides the staking reward engine:
- settlement: daily yield and team reward placement against entry caps
- sponsor_chain: upline traversal and level-weighted team rewards
- unit_of_work: per-entity transactions with failure isolation
- roi_distributor: daily ROI distribution
- team_earnings_distributor: multi-level team earnings distribution
- pipeline: ROI then team earnings for one run date
- stake_service, sponsor_service, staking_report: supporting operations

All components are re-exported for easy importing.
"""

from app.services.staking.pipeline import (
    DailyDistributionResult,
    run_daily_distribution,
)
from app.services.staking.roi_distributor import (
    EntryDistributionResult,
    RoiDistributionSummary,
    RoiDistributor,
    UserDistributionResult,
)
from app.services.staking.sponsor_service import SponsorService
from app.services.staking.stake_service import StakeService
from app.services.staking.staking_report import StakingReportService
from app.services.staking.team_earnings_distributor import (
    TeamDistributionSummary,
    TeamEarningsDistributor,
)

__all__ = [
    "RoiDistributor",
    "RoiDistributionSummary",
    "UserDistributionResult",
    "EntryDistributionResult",
    "TeamEarningsDistributor",
    "TeamDistributionSummary",
    "DailyDistributionResult",
    "run_daily_distribution",
    "StakeService",
    "SponsorService",
    "StakingReportService",
]
