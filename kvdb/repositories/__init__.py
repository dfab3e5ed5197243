"""
Data Access Layer Module Initialization
"""

from kvdb.repositories.kv_store_repo import KVStoreRepository

__all__ = [
    "KVStoreRepository",
]
