"""
Configuration management for the finance engine.
"""

from decimal import Decimal
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FinanceEngineConfig(BaseSettings):
    """Configuration settings for the finance engine."""

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Finance Configuration
    default_commission_percent: Decimal = Field(
        default=Decimal("10"), alias="DEFAULT_COMMISSION_PERCENT"
    )
    display_timezone: str = Field(default="Europe/Bratislava", alias="DISPLAY_TIMEZONE")
    currency_symbol: str = Field(default="€", alias="CURRENCY_SYMBOL")

    # Report cache Configuration
    enable_report_cache: bool = Field(default=True, alias="ENABLE_REPORT_CACHE")
    cache_max_size: int = Field(default=256, alias="CACHE_MAX_SIZE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()

    @field_validator("display_timezone")
    @classmethod
    def validate_display_timezone(cls, v):
        """Ensure the timezone name is known to the tz database."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator("default_commission_percent")
    @classmethod
    def validate_commission_percent(cls, v):
        """Ensure the default commission percentage is within 0-100."""
        if v < 0 or v > 100:
            raise ValueError("Default commission percent must be between 0 and 100")
        return v

    @field_validator("cache_max_size")
    @classmethod
    def validate_cache_max_size(cls, v):
        """Ensure the cache holds at least one report."""
        if v < 1:
            raise ValueError("Cache max size must be at least 1")
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        """The display timezone used for calendar-day grouping."""
        return ZoneInfo(self.display_timezone)


def load_config(env_file: Optional[str] = None) -> FinanceEngineConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return FinanceEngineConfig()


# Global configuration instance
_config: Optional[FinanceEngineConfig] = None


def get_config() -> FinanceEngineConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> FinanceEngineConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
