"""
SQLAlchemy Repository Implementation Module Initialization
"""

from kvdb.repositories.sqlalchemy.kv_store_repo import SQLAlchemyKVStoreRepository

__all__ = [
    "SQLAlchemyKVStoreRepository",
]
