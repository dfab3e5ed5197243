"""
Database Session Management Module

Provides asynchronous database session management, supporting SQLite and PostgreSQL.
"""

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from kvdb.config import get_settings

logger = logging.getLogger(__name__)

# Get configuration
settings = get_settings()

if settings.DATABASE_TYPE == "sqlite":
    # SQLite serializes writers at the database level
    engine_options = {"connect_args": {"check_same_thread": False}}
else:
    # A sweep's DELETE re-checks rows that a concurrent read refreshed and
    # committed first, so a reactivated key is not deleted.
    engine_options = {"isolation_level": "READ COMMITTED", "pool_pre_ping": True}

# Create asynchronous database engine
# echo=True prints SQL statements in DEBUG mode
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **engine_options,
)

# Create asynchronous session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,  # Do not expire objects after commit, avoids extra queries
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session (for dependency injection)

    Uses async with to ensure session is closed correctly.
    Used as Depends in FastAPI.

    Yields:
        AsyncSession: Async database session
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Initialize Database

    Creates the keys table if it does not exist. Called on application startup.
    """
    from kvdb.db.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized")
