"""
SQLAlchemy ORM Model Definitions

Defines the database table structure of the key-value store:
- keys: Key Records Table
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy ORM Base Class"""
    pass


class KeyRecord(Base):
    """
    Key Records Table

    One row per stored key. last_active_at is refreshed by every successful
    read or write and is what the expiration sweep selects on.
    """
    __tablename__ = "keys"

    # Key Name, primary key
    name: Mapped[str] = mapped_column(String, primary_key=True)
    # Stored Value
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Read-only flag, fixed at creation
    read_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Creation Time
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    # Last Read/Write Time
    last_active_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    __table_args__ = (
        Index("idx_keys_last_active_at", "last_active_at"),
    )
