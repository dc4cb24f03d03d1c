"""
Declarative base.

Shared SQLAlchemy base class and column types for the staking models.
"""

from sqlalchemy import DECIMAL
from sqlalchemy.orm import DeclarativeBase

# Amounts, balances, yields and caps: 8 decimal places
# Range: up to 9,999,999,999.99999999
MoneyType = DECIMAL(18, 8)

# Daily ROI percent (e.g. 0.8000, 1.7000)
RatePercentType = DECIMAL(10, 4)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass
