# src/exrate/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Values come from environment variables or a local .env file.

Files that USE this module:
- exrate.app (composition root reads every section)
- exrate.adapters.providers.exchangerate_host (API URL, key, timeout, retry policy)
- exrate.adapters.telegram.handlers (admin username)

Files that this module USES:
- exrate.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from pathlib import Path  # Object-oriented filesystem paths
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from exrate.shared.validators import (
    validate_bot_token,  # Validate Telegram bot token format
    validate_username,  # Validate Telegram username format
)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Telegram ---
    bot_token: str = Field(default="", alias="BOT_TOKEN")
    admin_username: str = Field(default="", alias="ADMIN_USERNAME")

    # --- Upstream rate provider ---
    exchange_api_url: str = Field(default="https://api.exchangerate.host", alias="EXCHANGE_API_URL")
    exchange_api_key: str = Field(default="", alias="EXCHANGE_API_KEY")

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)
    http_max_attempts: int = Field(default=3, alias="HTTP_MAX_ATTEMPTS", ge=1, le=10)
    http_retry_delay_seconds: float = Field(default=1.0, alias="HTTP_RETRY_DELAY_SECONDS", ge=0.0, le=30.0)

    # --- Rate cache ---
    rate_cache_enabled: bool = Field(default=True, alias="RATE_CACHE_ENABLED")
    rate_cache_max_entries: int = Field(default=0, alias="RATE_CACHE_MAX_ENTRIES", ge=0)

    # --- Supported currency catalog ---
    catalog_refresh_minutes: int = Field(default=60, alias="CATALOG_REFRESH_MINUTES", ge=1, le=1440)
    catalog_file: Path = Field(default=Path("./data/currencies.json"), alias="CATALOG_FILE")

    # --- Logging (for server deployment) ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="EXRATE_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @field_validator("bot_token")
    @classmethod
    def validate_bot_token(cls, v: str) -> str:
        """Validate bot token format (empty is allowed until the bot starts)."""
        if v and not validate_bot_token(v):
            raise ValueError("Invalid BOT_TOKEN format")
        return v

    @field_validator("admin_username")
    @classmethod
    def validate_admin_username(cls, v: str) -> str:
        if v and not validate_username(v):
            raise ValueError("Invalid ADMIN_USERNAME format")
        return v.lstrip("@")

    @field_validator("exchange_api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("EXCHANGE_API_URL must be an http(s) URL")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")
        return level


# Global settings instance
settings = Settings()
