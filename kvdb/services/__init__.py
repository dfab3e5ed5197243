"""
Service Layer Module Initialization
"""

from kvdb.services.kv_store_service import KVStoreService
from kvdb.services.expiration_service import ExpirationSweeper, SweeperState

__all__ = [
    "KVStoreService",
    "ExpirationSweeper",
    "SweeperState",
]
