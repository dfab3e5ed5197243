"""
Key-Value Store Service Module

Provides business logic for the key CRUD operations: input validation, key
name generation and timestamping. Storage atomicity is the repository's job.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, Optional

from kvdb.common.errors import (
    InvalidKeyNameError,
    KeyTooLongError,
    ValueTooLongError,
)
from kvdb.common.time import utc_now
from kvdb.domain.kv_store import KeyRecordModel
from kvdb.repositories.kv_store_repo import KVStoreRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_KEY_NAME_LENGTH = 256
DEFAULT_MAX_VALUE_LENGTH = 1024 * 1024

_KEY_NAME_PUNCTUATION = frozenset("_-.")


def is_valid_key_name(name: str) -> bool:
    """Key names are non-empty and contain only alphanumerics, '_', '-' and '.'"""
    if not name:
        return False
    return all(c.isalnum() or c in _KEY_NAME_PUNCTUATION for c in name)


def encoded_length(text: str) -> int:
    """Length of text in UTF-8 bytes"""
    return len(text.encode("utf-8"))


class KVStoreService:
    """
    Key-Value Store Service

    Stateless with respect to records: every call maps to one repository
    transaction.
    """

    def __init__(
        self,
        repo: KVStoreRepository,
        max_key_length: int = DEFAULT_MAX_KEY_NAME_LENGTH,
        max_value_length: int = DEFAULT_MAX_VALUE_LENGTH,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize Service

        Args:
            repo: KV Store Repository
            max_key_length: Maximum key name size in bytes
            max_value_length: Maximum value size in bytes
            clock: Source of the current UTC time
        """
        self.repo = repo
        self.max_key_length = max_key_length
        self.max_value_length = max_value_length
        self._clock = clock

    def _check_key_name(self, name: str) -> None:
        length = encoded_length(name)
        if length > self.max_key_length:
            raise KeyTooLongError(length, self.max_key_length)
        if not is_valid_key_name(name):
            raise InvalidKeyNameError(name)

    def _check_value(self, value: str) -> None:
        length = encoded_length(value)
        if length > self.max_value_length:
            raise ValueTooLongError(length, self.max_value_length)

    async def create(
        self, name: Optional[str], value: Optional[str] = "", read_only: bool = False
    ) -> KeyRecordModel:
        """
        Create a key

        Args:
            name: Key name, a random UUID is generated when None
            value: Value to store, None is stored as an empty string
            read_only: Forbid updates for the lifetime of the key

        Returns:
            KeyRecordModel: Metadata of the created key

        Raises:
            KeyTooLongError, ValueTooLongError, InvalidKeyNameError: Invalid input
            KeyAlreadyExistsError: Key already exists
        """
        if name is None:
            name = str(uuid.uuid4())
        if value is None:
            value = ""
        self._check_key_name(name)
        self._check_value(value)

        record = await self.repo.create(name, value, read_only, self._clock())
        logger.debug(f"Key created: name={name}, read_only={read_only}")
        return record

    async def read(self, name: str) -> str:
        """
        Get the value of a key, marking the key as active

        Raises:
            KeyNotFoundError: Key does not exist
        """
        return await self.repo.read(name, self._clock())

    async def update(self, name: str, value: str) -> None:
        """
        Replace the value of a key

        Raises:
            ValueTooLongError: Value exceeds the size limit
            KeyNotFoundError: Key does not exist
            ReadOnlyViolationError: Key is read-only
        """
        self._check_value(value)
        await self.repo.update(name, value, self._clock())
        logger.debug(f"Key updated: name={name}")

    async def delete(self, name: str) -> None:
        """
        Delete a key

        Raises:
            KeyNotFoundError: Key does not exist
        """
        await self.repo.delete(name)
        logger.debug(f"Key deleted: name={name}")
