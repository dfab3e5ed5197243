"""
Configuration Management Module

Configures application parameters via environment variables or .env file.
Supports SQLite (default) and PostgreSQL databases.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from kvdb.common.duration import parse_duration


class Settings(BaseSettings):
    """
    Application Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    # Application Config
    APP_NAME: str = "kvdb"
    DEBUG: bool = False

    # Server Config
    # Address the HTTP server binds to, in host:port form
    LISTEN_ON: str = "0.0.0.0:3005"

    # Database Config
    # Supports "sqlite" or "postgresql"
    DATABASE_TYPE: Literal["sqlite", "postgresql"] = "sqlite"
    # SQLite default database path, PostgreSQL requires full connection string
    DATABASE_URL: str = "sqlite+aiosqlite:///./kvdb.db"

    # Rate Limit Config
    # Enable/disable rate limiting (useful for development)
    RATE_LIMIT_ENABLED: bool = True
    # Tokens added to the shared bucket per second
    RATE_LIMIT_PER_SECOND: float = 10.0
    # Maximum number of tokens the bucket can bank
    RATE_LIMIT_BURST_SIZE: int = 20

    # CORS Config
    # Comma-separated list of allowed origins, "*" allows all.
    # Entries may contain wildcards, e.g. "https://*.example.org"
    CORS_ORIGINS: str = ""

    # Key Expiration Config
    # Inactivity window after which a key is deleted, e.g. "6 months", "1 hour".
    # Expiration runs only when both values are set.
    DELETE_UNUSED_KEYS_AFTER: Optional[str] = None
    # Interval between expiration sweeps (seconds). Unset or 0 disables the sweeper.
    KEY_CLEANUP_EVERY_S: Optional[float] = None

    # Size Limits (bytes of UTF-8)
    MAX_KEY_NAME_LENGTH: int = 256
    MAX_VALUE_LENGTH: int = 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @field_validator("DELETE_UNUSED_KEYS_AFTER", mode="before")
    @classmethod
    def validate_retention(cls, v: Optional[str]) -> Optional[str]:
        """Blank disables expiration; anything else must be a well-formed duration"""
        if v is None:
            return None
        v = str(v).strip()
        if not v:
            return None
        parse_duration(v)
        return v

    @field_validator("KEY_CLEANUP_EVERY_S", mode="before")
    @classmethod
    def validate_cleanup_interval(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        v = float(v)
        if v < 0:
            raise ValueError("KEY_CLEANUP_EVERY_S must not be negative")
        return v or None

    @field_validator("RATE_LIMIT_PER_SECOND", "RATE_LIMIT_BURST_SIZE")
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("rate limit settings must be positive")
        return v

    @property
    def retention_window(self) -> Optional[timedelta]:
        """Parsed DELETE_UNUSED_KEYS_AFTER, None when expiration is disabled"""
        if self.DELETE_UNUSED_KEYS_AFTER is None:
            return None
        return parse_duration(self.DELETE_UNUSED_KEYS_AFTER)

    @property
    def sweeper_enabled(self) -> bool:
        return self.retention_window is not None and self.KEY_CLEANUP_EVERY_S is not None

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def listen_host(self) -> str:
        host, _, _ = self.LISTEN_ON.rpartition(":")
        return host or "0.0.0.0"

    @property
    def listen_port(self) -> int:
        _, _, port = self.LISTEN_ON.rpartition(":")
        return int(port)

    def sanitized(self) -> dict:
        """Configuration dump safe for logging (database URL redacted)"""
        data = self.model_dump()
        data["DATABASE_URL"] = "REDACTED"
        return data


@lru_cache()
def get_settings() -> Settings:
    """
    Get application configuration (Singleton)

    Uses lru_cache to ensure configuration is loaded only once, improving performance.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
