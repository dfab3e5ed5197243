"""
Key-Value Store Repository SQLAlchemy Implementation

Provides concrete database operation implementation for KV Store.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

from sqlalchemy import case, delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kvdb.common.errors import (
    AppError,
    KeyAlreadyExistsError,
    KeyNotFoundError,
    ReadOnlyViolationError,
    StorageError,
)
from kvdb.common.time import ensure_utc, to_utc_naive
from kvdb.db.models import KeyRecord as KeyRecordORM
from kvdb.domain.kv_store import KeyRecordModel
from kvdb.repositories.kv_store_repo import KVStoreRepository


def _refreshed_last_active(now: datetime):
    """SQL expression for max(last_active_at, now), keeping the timestamp non-decreasing"""
    return case(
        (KeyRecordORM.last_active_at > now, KeyRecordORM.last_active_at),
        else_=now,
    )


class SQLAlchemyKVStoreRepository(KVStoreRepository):
    """
    Key-Value Store Repository SQLAlchemy Implementation

    Each public method runs as exactly one transaction: it commits on success and
    rolls back on any error. Database errors surface as StorageError.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize Repository

        Args:
            session: Async database session
        """
        self.session = session

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
            await self.session.commit()
        except AppError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError(
                message=f"Storage failure during {operation}",
                details={"operation": operation},
            ) from e

    async def create(
        self, name: str, value: str, read_only: bool, now: datetime
    ) -> KeyRecordModel:
        """Insert a new key, failing if the name is taken"""
        ts = to_utc_naive(now)
        async with self._transaction("create"):
            try:
                await self.session.execute(
                    insert(KeyRecordORM).values(
                        name=name,
                        value=value,
                        read_only=read_only,
                        created_at=ts,
                        last_active_at=ts,
                    )
                )
            except IntegrityError as e:
                raise KeyAlreadyExistsError(name) from e

        return KeyRecordModel(
            name=name,
            read_only=read_only,
            created_at=ensure_utc(ts),
            last_active_at=ensure_utc(ts),
        )

    async def read(self, name: str, now: datetime) -> str:
        """Return the value and refresh last_active_at in one statement"""
        async with self._transaction("read"):
            result = await self.session.execute(
                update(KeyRecordORM)
                .where(KeyRecordORM.name == name)
                .values(last_active_at=_refreshed_last_active(to_utc_naive(now)))
                .returning(KeyRecordORM.value)
                .execution_options(synchronize_session=False)
            )
            row = result.first()
            if row is None:
                raise KeyNotFoundError(name)

        return row[0]

    async def update(self, name: str, value: str, now: datetime) -> None:
        """Replace the value of a writable key"""
        async with self._transaction("update"):
            result = await self.session.execute(
                update(KeyRecordORM)
                .where(
                    KeyRecordORM.name == name,
                    KeyRecordORM.read_only.is_(False),
                )
                .values(
                    value=value,
                    last_active_at=_refreshed_last_active(to_utc_naive(now)),
                )
                .returning(KeyRecordORM.name)
                .execution_options(synchronize_session=False)
            )
            if result.first() is not None:
                return

            # Nothing matched: tell a missing key apart from a read-only one
            existing = await self.session.execute(
                select(KeyRecordORM.read_only).where(KeyRecordORM.name == name)
            )
            if existing.scalar_one_or_none() is None:
                raise KeyNotFoundError(name)
            raise ReadOnlyViolationError(name)

    async def delete(self, name: str) -> None:
        """Delete a key"""
        async with self._transaction("delete"):
            result = await self.session.execute(
                delete(KeyRecordORM)
                .where(KeyRecordORM.name == name)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise KeyNotFoundError(name)

    async def delete_inactive_before(self, cutoff: datetime) -> int:
        """Delete every key last touched before cutoff"""
        async with self._transaction("sweep"):
            result = await self.session.execute(
                delete(KeyRecordORM)
                .where(KeyRecordORM.last_active_at < to_utc_naive(cutoff))
                .execution_options(synchronize_session=False)
            )

        return result.rowcount
