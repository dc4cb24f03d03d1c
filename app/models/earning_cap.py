"""
Earning cap variants.

A staking entry either has a lifetime earning ceiling (``Capped``) or pays
out without one (``Uncapped``, the promotional "flushed" entries).
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Capped:
    """Lifetime earning ceiling of a staking entry."""

    limit: Decimal

    def remaining(self, earned: Decimal) -> Decimal:
        """Room left under the cap, never negative."""
        return max(self.limit - earned, Decimal("0"))

    def is_reached(self, earned: Decimal) -> bool:
        """Check if ``earned`` has hit the ceiling."""
        return earned >= self.limit


@dataclass(frozen=True)
class Uncapped:
    """Entry without a lifetime ceiling."""


UNCAPPED = Uncapped()

EarningCap = Capped | Uncapped


def cap_from_column(max_earning: Decimal | None) -> EarningCap:
    """
    Build the cap variant from the stored ``max_earning`` column.

    Args:
        max_earning: Stored cap, ``None`` for uncapped entries

    Returns:
        ``Capped(limit)`` or ``UNCAPPED``
    """
    if max_earning is None:
        return UNCAPPED
    return Capped(Decimal(max_earning))
