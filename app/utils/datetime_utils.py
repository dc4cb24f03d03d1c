"""
Datetime utilities.

Provides timezone-aware datetime functions.
"""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def utc_today() -> date:
    """
    Get current UTC calendar date.

    Used as the default distribution run date.

    Returns:
        Today's date in UTC
    """
    return utc_now().date()


def parse_run_date(value: str | None) -> date | None:
    """
    Parse an ISO run date as passed through task queues and CLIs.

    Args:
        value: ``YYYY-MM-DD`` or None

    Returns:
        Parsed date, None when no date was given
    """
    return date.fromisoformat(value) if value else None
