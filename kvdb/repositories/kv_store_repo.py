"""
Key-Value Store Repository Interface

Defines the data access interface for KV Store. Every method is one atomic
transaction against the keys table.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from kvdb.domain.kv_store import KeyRecordModel


class KVStoreRepository(ABC):
    """Key-Value Store Repository Interface"""

    @abstractmethod
    async def create(
        self, name: str, value: str, read_only: bool, now: datetime
    ) -> KeyRecordModel:
        """
        Insert a new key

        Args:
            name: Key name
            value: Value to store
            read_only: Whether the value may never be changed
            now: Creation time, also the initial last_active_at

        Returns:
            KeyRecordModel: Metadata of the created key

        Raises:
            KeyAlreadyExistsError: A key with this name exists
            StorageError: The transaction failed
        """
        pass

    @abstractmethod
    async def read(self, name: str, now: datetime) -> str:
        """
        Fetch a value and refresh its last_active_at in the same transaction

        Raises:
            KeyNotFoundError: No such key
            StorageError: The transaction failed
        """
        pass

    @abstractmethod
    async def update(self, name: str, value: str, now: datetime) -> None:
        """
        Replace the value of a writable key and refresh its last_active_at

        Raises:
            KeyNotFoundError: No such key
            ReadOnlyViolationError: The key is read-only
            StorageError: The transaction failed
        """
        pass

    @abstractmethod
    async def delete(self, name: str) -> None:
        """
        Delete a key, read-only or not

        Raises:
            KeyNotFoundError: No such key
            StorageError: The transaction failed
        """
        pass

    @abstractmethod
    async def delete_inactive_before(self, cutoff: datetime) -> int:
        """
        Delete all keys whose last_active_at is older than cutoff

        Returns:
            Number of deleted keys
        """
        pass
