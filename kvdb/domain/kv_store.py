"""
Key-Value Store Domain Model

Defines KV Store related Data Transfer Objects (DTOs).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class KeyRecordModel(BaseModel):
    """Key metadata (the value is not carried)"""

    name: str = Field(..., description="Key Name")
    read_only: bool = Field(..., description="Read-only Flag")
    created_at: datetime = Field(..., description="Creation Time")
    last_active_at: datetime = Field(..., description="Last Read/Write Time")

    model_config = ConfigDict(from_attributes=True)


class KeyCreate(BaseModel):
    """Create Key Request Model"""

    # Generated when omitted
    name: Optional[str] = Field(None, description="Key Name")
    # null is stored as an empty string
    value: Optional[str] = Field(None, description="Value")
    read_only: bool = Field(False, description="Disallow updates after creation")


class KeyCreateResponse(KeyRecordModel):
    """Create Key Response Model"""

    success: bool = True


class KeyGetResponse(BaseModel):
    """Get Key Response Model"""

    value: str = Field(..., description="Value")
    success: bool = True


class KeyUpdate(BaseModel):
    """Update Key Request Model"""

    name: str = Field(..., description="Key Name")
    value: str = Field(..., description="New Value")


class KeyUpdateResponse(BaseModel):
    """Update Key Response Model"""

    success: bool = True


class KeyDeleteResponse(BaseModel):
    """Delete Key Response Model"""

    success: bool = True
