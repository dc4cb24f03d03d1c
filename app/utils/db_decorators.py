"""
Database decorators.

Commit-or-rollback wrapper for async functions that receive a SQLAlchemy
session.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession


T = TypeVar("T")


def _find_session(args: tuple, kwargs: dict) -> Any:
    session = kwargs.get("session")
    if session is None and args and isinstance(args[0], AsyncSession):
        session = args[0]
    return session


def with_auto_commit(func: Callable[..., T]) -> Callable[..., T]:
    """
    Commit the session when the wrapped function returns, roll back when
    it raises.

    Usage:
        @with_auto_commit
        async def settle(session: AsyncSession, user_id: int):
            balance = await UserBalanceRepository(session).get_for_update(user_id)
            balance.balance += payout

    Args:
        func: Async function taking ``session`` as keyword or first
              positional argument

    Returns:
        Wrapped function

    Raises:
        TypeError: When called without a session
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        session = _find_session(args, kwargs)
        if session is None:
            raise TypeError(f"{func.__name__} requires a session argument")

        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            try:
                await session.rollback()
            except Exception as rollback_error:
                logger.error(
                    f"Failed to rollback in {func.__name__}: {rollback_error}",
                    exc_info=True,
                )
            else:
                logger.debug(
                    f"Rolled back {func.__name__} after {type(e).__name__}"
                )
            raise

        await session.commit()
        return result

    return wrapper
