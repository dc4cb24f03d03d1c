"""
Run the daily distribution by hand.

Usage:
    python scripts/run_daily_distribution.py                 # ROI + team earnings for today
    python scripts/run_daily_distribution.py --date 2026-01-31
    python scripts/run_daily_distribution.py --stage roi --user-id 42
    python scripts/run_daily_distribution.py --stage team
"""

import argparse
import asyncio
import json
import sys
from datetime import date
from pathlib import Path


# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.config.settings import settings
from app.services.staking.pipeline import run_daily_distribution
from app.services.staking.roi_distributor import RoiDistributor
from app.services.staking.team_earnings_distributor import TeamEarningsDistributor


# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO")


async def run(stage: str, run_date: date | None, user_id: int | None) -> dict:
    engine = create_async_engine(
        settings.database_url,
        echo=False,
        poolclass=NullPool,
    )
    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    try:
        if stage == "roi":
            summary = await RoiDistributor(session_maker).distribute_daily_staking_rewards(
                user_id=user_id, run_date=run_date
            )
            return summary.to_dict()

        if stage == "team":
            summary = await TeamEarningsDistributor(session_maker).distribute_team_earnings(
                run_date=run_date
            )
            return summary.to_dict()

        result = await run_daily_distribution(session_maker, run_date)
        return result.to_dict()
    finally:
        await engine.dispose()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Run daily ROI and team earnings distribution")
    parser.add_argument(
        "--stage",
        choices=["all", "roi", "team"],
        default="all",
        help="Which distribution to run (default: all)",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Run date, YYYY-MM-DD (default: today, UTC)",
    )
    parser.add_argument(
        "--user-id",
        type=int,
        default=None,
        help="Settle a single user's ROI (only with --stage roi)",
    )

    args = parser.parse_args()

    if args.user_id is not None and args.stage != "roi":
        parser.error("--user-id requires --stage roi")

    result = asyncio.run(run(args.stage, args.date, args.user_id))
    print(json.dumps(result, indent=2))

    failed = result.get("failed_users") or [
        user_id
        for part in ("roi", "team")
        for user_id in result.get(part, {}).get("failed_users", [])
    ]
    if failed:
        logger.warning(f"{len(failed)} units failed: {failed}")
        sys.exit(1)


if __name__ == "__main__":
    main()
