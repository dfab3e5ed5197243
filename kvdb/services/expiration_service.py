"""
Key Expiration Service Module

Deletes keys that have been neither read nor written for longer than the
configured retention window.
"""

import enum
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kvdb.common.time import utc_now
from kvdb.repositories.sqlalchemy.kv_store_repo import SQLAlchemyKVStoreRepository

logger = logging.getLogger(__name__)


class SweeperState(str, enum.Enum):
    IDLE = "idle"
    SWEEPING = "sweeping"


class ExpirationSweeper:
    """
    Expiration Sweeper

    One sweep is a single bulk delete in its own transaction. Keys refreshed by
    a concurrent read or write after the cutoff no longer match the delete
    predicate and survive.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        retention: timedelta,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize Sweeper

        Args:
            session_factory: Factory for the session each sweep runs in
            retention: Inactivity window after which a key is deleted
            clock: Source of the current UTC time
        """
        if retention <= timedelta(0):
            raise ValueError("retention must be positive")
        self._session_factory = session_factory
        self.retention = retention
        self._clock = clock
        self.state = SweeperState.IDLE
        self.last_sweep_at: Optional[datetime] = None
        self.last_deleted_count: Optional[int] = None

    def cutoff(self) -> datetime:
        """Keys last active before this instant are expired"""
        return self._clock() - self.retention

    async def sweep(self) -> int:
        """
        Run one sweep

        Returns:
            int: Number of deleted keys

        Raises:
            StorageError: The bulk delete failed
        """
        self.state = SweeperState.SWEEPING
        try:
            cutoff = self.cutoff()
            async with self._session_factory() as session:
                repo = SQLAlchemyKVStoreRepository(session)
                deleted_count = await repo.delete_inactive_before(cutoff)
        finally:
            self.state = SweeperState.IDLE

        self.last_sweep_at = self._clock()
        self.last_deleted_count = deleted_count
        return deleted_count

    async def run(self) -> Optional[int]:
        """
        Scheduled entry point

        Failures are logged and left for the next scheduled sweep.

        Returns:
            Optional[int]: Number of deleted keys, None if the sweep failed
        """
        logger.info(f"Starting unused key cleanup (retention: {self.retention})")
        try:
            deleted_count = await self.sweep()
        except Exception as e:
            logger.error(f"Unused key cleanup failed: {str(e)}", exc_info=True)
            return None

        logger.info(f"Unused key cleanup complete: {deleted_count} keys deleted")
        return deleted_count
