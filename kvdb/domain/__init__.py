"""
Domain Model Module Initialization
"""

from kvdb.domain.kv_store import (
    KeyRecordModel,
    KeyCreate,
    KeyCreateResponse,
    KeyGetResponse,
    KeyUpdate,
    KeyUpdateResponse,
    KeyDeleteResponse,
)

__all__ = [
    "KeyRecordModel",
    "KeyCreate",
    "KeyCreateResponse",
    "KeyGetResponse",
    "KeyUpdate",
    "KeyUpdateResponse",
    "KeyDeleteResponse",
]
