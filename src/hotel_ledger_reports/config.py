"""Centralized configuration management using pydantic-settings.

Configuration is loaded from environment variables with sensible defaults.
All settings can be overridden via environment variables or a .env file.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hotel_ledger_reports.domain.artifacts import ExportEncoding


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Override via environment variables (prefixed with HLR_) or .env file.

    Examples:
        HLR_API_BASE_URL=https://hotel.example.com
        HLR_API_TOKEN=eyJhbGciOi...
        HLR_DEFAULT_LANGUAGE=en
        HLR_EXPORT_ENCODING=utf16le-bom
    """

    model_config = SettingsConfigDict(
        env_prefix="HLR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Hotel Ledger Reports"
    environment: Environment = Environment.DEVELOPMENT

    # Ledger source
    api_base_url: str = "https://www.osusideas.online"
    api_token: str | None = Field(
        default=None,
        validate_default=True,
        description="JWT access token sent to the ledger source",
    )
    api_timeout: float = Field(default=30.0, gt=0)
    account_tree_path: str = Field(
        default="/ar/report/api/account-tree/",
        description="Path of the chart-of-accounts tree endpoint",
    )

    # Report screens
    default_language: Literal["ar", "en"] = "ar"
    default_page_size: int = Field(default=10, ge=1, le=500)
    search_debounce_seconds: float = Field(
        default=0.4,
        ge=0.3,
        le=0.5,
        description="Delay applied to keystroke-driven searches before querying",
    )

    # Artifacts
    export_encoding: ExportEncoding = ExportEncoding.UTF8_BOM
    export_directory: Path = Field(default=Path("."))
    preview_directory: Path | None = Field(
        default=None,
        description="Where print previews are staged. Defaults to the system temp dir.",
    )

    # Logging
    log_level: LogLevel = LogLevel.INFO
    log_format: Literal["json", "console"] = Field(
        default=None,
        validate_default=True,
        description="Log output format: 'json' for production, 'console' for development",
    )
    log_file: Path | None = Field(default=None, description="Optional log file path")

    @field_validator("log_format", mode="before")
    @classmethod
    def set_log_format_from_environment(cls, v: str | None, info) -> str:
        """Default to JSON logging in production."""
        if v is None:
            env = info.data.get("environment")
            if env == Environment.PRODUCTION:
                return "json"
        return v or "console"

    @field_validator("api_token", mode="after")
    @classmethod
    def require_token_outside_development(cls, v: str | None, info) -> str | None:
        """Production and staging must talk to the ledger source authenticated."""
        environment = info.data.get("environment")
        if not v and environment in (Environment.PRODUCTION, Environment.STAGING):
            raise ValueError(
                f"HLR_API_TOKEN must be set in {environment.value}."
            )
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
