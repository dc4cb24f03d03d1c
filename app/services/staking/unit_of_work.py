"""
Unit of work runner.

Runs one handler per entity (user or sponsor) in its own session and
transaction. A failing unit is rolled back, logged and recorded; the batch
moves on to the next unit.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.utils.db_decorators import with_auto_commit
from app.utils.exceptions import must_log


T = TypeVar("T")

SessionMaker = Callable[[], Any]


@dataclass
class UnitFailure:
    """A unit whose transaction was rolled back."""

    unit_id: int
    error: str


class UnitOfWorkRunner:
    """Executes per-entity units of work sequentially."""

    def __init__(self, session_maker: SessionMaker, unit_name: str) -> None:
        """
        Initialize runner.

        Args:
            session_maker: Factory returning an async session context manager
            unit_name: Label used in logs (e.g. "user", "sponsor")
        """
        self.session_maker = session_maker
        self.unit_name = unit_name
        self.failures: list[UnitFailure] = []

    @property
    def failed_ids(self) -> list[int]:
        """IDs of units that failed, in processing order."""
        return [failure.unit_id for failure in self.failures]

    async def run(
        self,
        unit_id: int,
        handler: Callable[[AsyncSession], Awaitable[T]],
    ) -> T | None:
        """
        Run one unit of work in a fresh transaction.

        Args:
            unit_id: Entity ID the unit settles
            handler: Coroutine function receiving the session

        Returns:
            Handler result, or None when the unit failed
        """
        @with_auto_commit
        async def unit(session: AsyncSession) -> T:
            return await handler(session)

        async with self.session_maker() as session:
            try:
                return await unit(session=session)
            except Exception as e:
                self.failures.append(UnitFailure(unit_id, str(e)))
                # Error text stays out of the message: loguru formats it
                log_extra = {
                    f"{self.unit_name}_id": unit_id,
                    "error_type": type(e).__name__,
                    "error": str(e),
                }
                if must_log(e):
                    logger.error(
                        f"Failed to settle {self.unit_name} {unit_id}",
                        extra=log_extra,
                    )
                else:
                    logger.exception(
                        f"Unexpected error settling {self.unit_name} {unit_id}",
                        extra=log_extra,
                    )
                return None
