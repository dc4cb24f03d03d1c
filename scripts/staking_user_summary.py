"""
Staking user summary report.

Per-user totals from staking entries: amount on stake (active stakes only),
lifetime earnings and remaining cap, with a per-stake breakdown.

Usage:
    python scripts/staking_user_summary.py
    python scripts/staking_user_summary.py --active-only --out=reports/stakes
Writes OUT.json and OUT.csv (default prefix: STAKING_USER_SUMMARY).
"""

import argparse
import asyncio
import sys
from pathlib import Path


# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.config.settings import settings
from app.services.staking.staking_report import StakingReportService


# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO")


async def build_report(active_only: bool, out_prefix: str) -> None:
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
        async with session_maker() as session:
            report = await StakingReportService(session).build_user_summary(
                active_only=active_only
            )
    finally:
        await engine.dispose()

    currency = settings.default_currency
    logger.info("📊 Staking User Summary")
    logger.info(f"Users: {len(report.users)}")
    logger.info(f"Stakes: {report.stakes_count}")
    logger.info(f"Total wallet balance: {report.total_balance:.2f} {currency}")
    logger.info(f"Total on stake: {report.total_on_stake:.2f} {currency}")
    logger.info(f"Total earned: {report.total_earned:.2f} {currency}")
    logger.info(f"Total remaining cap: {report.total_remaining_cap:.2f} {currency}")

    json_path = Path(f"{out_prefix}.json")
    csv_path = Path(f"{out_prefix}.csv")
    json_path.parent.mkdir(parents=True, exist_ok=True)
    json_path.write_text(report.to_json(), encoding="utf-8")
    csv_path.write_text(report.to_csv(), encoding="utf-8")

    logger.success(f"✅ Wrote {json_path} and {csv_path}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Per-user staking summary report")
    parser.add_argument(
        "--active-only",
        action="store_true",
        help="Only include active stakes",
    )
    parser.add_argument(
        "--out",
        type=str,
        default="STAKING_USER_SUMMARY",
        help="Output file prefix (default: STAKING_USER_SUMMARY)",
    )

    args = parser.parse_args()
    asyncio.run(build_report(args.active_only, args.out or "STAKING_USER_SUMMARY"))


if __name__ == "__main__":
    main()
