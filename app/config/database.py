"""
Database configuration.

Async SQLAlchemy engine and session factory.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from app.config.settings import settings


async_engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


def create_worker_session_maker() -> async_sessionmaker[AsyncSession]:
    """
    Session factory for dramatiq worker threads.

    Each worker thread runs its own event loop, so connections are not
    pooled across loops.
    """
    worker_engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        poolclass=NullPool,
    )
    return async_sessionmaker(
        worker_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
