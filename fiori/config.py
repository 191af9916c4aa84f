"""
Settings — typed configuration for the ordering core.

Values come from the environment (``FIORI_`` prefix) or a ``.env`` file:

    FIORI_DEBOUNCE_SECONDS=0.5
    FIORI_DEFAULT_COUNTRY=Italy
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for address validation, order snapshots, storage and logging."""

    # Address validation
    debounce_seconds: float = Field(default=1.0, ge=0)
    min_address_length: int = Field(default=10, ge=1)
    validation_timeout_seconds: float = Field(default=10.0, gt=0)

    # Order snapshots
    default_country: str = Field(default="Italy")
    currency: str = Field(default="EUR", min_length=3, max_length=3)

    # Storage
    database_url: str = Field(default="sqlite+aiosqlite:///:memory:")
    sql_echo: bool = Field(default=False)

    # Logging
    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="FIORI_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings instance."""
    return Settings()


__all__ = ("Settings", "get_settings")
