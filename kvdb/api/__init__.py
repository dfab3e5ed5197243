"""
API Router Module Initialization
"""

from kvdb.api.deps import get_db
from kvdb.api.keys import router as keys_router

__all__ = [
    "get_db",
    "keys_router",
]
