"""Async SQLAlchemy engine, session factory and declarative Base.

The schema is owned by Alembic (lms/infrastructure/persistence/migrations).
Engine and session factory are built on first use so importing this module
never loads Settings.
"""

import logging
from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from lms.core.config import get_settings
from lms.infrastructure.exceptions import DatabaseNotConfiguredException

logger = logging.getLogger(__name__)

engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def _ensure_engine() -> None:
    """Build the engine and AsyncSessionLocal once per process."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    connect_args = (
        {"command_timeout": settings.db_command_timeout}
        if settings.database_url.startswith("postgresql")
        else {}
    )
    engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=3600,
        connect_args=connect_args,
    )
    # Services keep using returned rows after the unit of work commits.
    AsyncSessionLocal = async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    logger.debug("Database engine created (pool_size=%s)", settings.db_pool_size)


def get_engine() -> AsyncEngine:
    _ensure_engine()
    if engine is None:
        raise DatabaseNotConfiguredException()
    return engine


async def dispose_engine() -> None:
    """Close pooled connections and forget the session factory (shutdown, tests, scripts)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None


class Base(DeclarativeBase):
    """Declarative base for the LMS tables."""


async def get_db() -> AsyncIterator[AsyncSession]:
    """Request-scoped session.

    Never commits: mutating use cases commit through SqlAlchemyUnitOfWork.
    """
    _ensure_engine()
    if AsyncSessionLocal is None:
        raise DatabaseNotConfiguredException()
    async with AsyncSessionLocal() as session:
        yield session
