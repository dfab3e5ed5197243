"""
API Dependency Injection Module

Provides the dependencies required by FastAPI routes.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kvdb.config import get_settings
from kvdb.db.session import get_db as _get_db
from kvdb.repositories.sqlalchemy import SQLAlchemyKVStoreRepository
from kvdb.services import KVStoreService


async def get_db():
    """
    Get database session dependency

    Yields:
        AsyncSession: Async database session
    """
    async for session in _get_db():
        yield session


# Database session dependency type
DbSession = Annotated[AsyncSession, Depends(get_db)]


# ============ Service Dependencies ============

def get_kv_store_service(db: DbSession) -> KVStoreService:
    """Get KV Store Service, configured with the current size limits"""
    settings = get_settings()
    return KVStoreService(
        SQLAlchemyKVStoreRepository(db),
        max_key_length=settings.MAX_KEY_NAME_LENGTH,
        max_value_length=settings.MAX_VALUE_LENGTH,
    )


KVStoreServiceDep = Annotated[KVStoreService, Depends(get_kv_store_service)]
