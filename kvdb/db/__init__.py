"""
Database Module Initialization
"""

from kvdb.db.session import get_db, init_db, AsyncSessionLocal
from kvdb.db.models import Base, KeyRecord

__all__ = [
    "get_db",
    "init_db",
    "AsyncSessionLocal",
    "Base",
    "KeyRecord",
]
