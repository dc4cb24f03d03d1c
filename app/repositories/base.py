"""
Base repository.

Generic data access shared by the staking repositories.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import Base

# Generic type for model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with generic operations.

    Repositories never commit: the caller owns the transaction.

    Type Parameters:
        ModelType: SQLAlchemy model class

    Example:
        class VoucherRepository(BaseRepository[Voucher]):
            def __init__(self, session: AsyncSession):
                super().__init__(Voucher, session)
    """

    def __init__(
        self, model: type[ModelType], session: AsyncSession
    ) -> None:
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get_by(
        self, **filters: Any
    ) -> ModelType | None:
        """
        Get single entity by filters.

        Args:
            **filters: Column filters

        Returns:
            Matching entity or None
        """
        stmt = select(self.model).filter_by(**filters)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, **data: Any) -> ModelType:
        """
        Create new entity.

        Flushes so that generated keys are available to the caller.

        Args:
            **data: Entity data

        Returns:
            Created entity
        """
        entity = self.model(**data)
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def bulk_create(
        self, items: list[dict[str, Any]]
    ) -> int:
        """
        Insert multiple rows in one statement.

        Args:
            items: List of entity data dicts

        Returns:
            Number of rows inserted
        """
        if not items:
            return 0

        await self.session.execute(insert(self.model), items)
        return len(items)

    async def delete_by(self, **filters: Any) -> None:
        """
        Delete all rows matching filters.

        Args:
            **filters: Column filters
        """
        await self.session.execute(delete(self.model).filter_by(**filters))
