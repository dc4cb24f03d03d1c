"""
Exception handling utilities.

Defines domain exception types and categories for proper error handling.
"""

from sqlalchemy.exc import IntegrityError, OperationalError


class StakingError(Exception):
    """Base error for staking operations."""
    pass


class BalanceNotFoundError(StakingError):
    """Raised when a user has no balance record."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"Balance record not found for user {user_id}")
        self.user_id = user_id


class SponsorshipError(StakingError):
    """Raised when a sponsor relationship would be invalid."""
    pass


class DistributionBlockedError(StakingError):
    """Raised when a distribution is halted by an emergency stop."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"{kind} distribution is blocked by emergency stop")
        self.kind = kind


# Exception categories based on handling strategy

# Must log but the batch can continue - one unit rolled back
MUST_LOG = (
    OperationalError,  # Lock timeouts, dropped connections
    IntegrityError,    # Constraint violations on a single unit
    StakingError,
)


def must_log(exc: Exception) -> bool:
    """
    Check if exception is an expected per-unit failure.

    Expected failures are logged without a traceback; anything else is
    logged with one.

    Args:
        exc: Exception to check

    Returns:
        True if exception is an expected per-unit failure
    """
    return isinstance(exc, MUST_LOG)
