"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The only external dependencies are the data file and the exchange-rate
API, and both are described by the settings below.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Finance document storage configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="FINANCE_STORAGE_",
        extra="ignore"
    )
    
    data_file: Path = Field(
        default=Path("data") / "finance-data.json",
        description="Path to the JSON finance document"
    )
    indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Indentation used when writing the document"
    )


class ExchangeRateSettings(BaseSettings):
    """Exchange-rate provider configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="FINANCE_RATES_",
        extra="ignore"
    )
    
    api_url: str = Field(
        default="https://api.exchangerate-api.com/v4/latest/USD",
        description="USD-based exchange rate endpoint"
    )
    cache_hours: float = Field(
        default=24.0,
        gt=0,
        description="Age after which cached rates are considered stale"
    )
    timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="Timeout for a single rate fetch"
    )
    retry_attempts: int = Field(
        default=2,
        ge=1,
        le=5,
        description="Attempts before a fetch is reported as failed"
    )
    
    @field_validator('api_url')
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Only http(s) endpoints are usable."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Exchange rate API URL must be http(s): {v}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )
    
    # Horizons
    upcoming_horizon_days: int = Field(
        default=30,
        ge=1,
        le=366,
        description="Default window for upcoming recurring transactions"
    )
    dashboard_upcoming_days: int = Field(
        default=7,
        ge=1,
        le=366,
        description="Window for upcoming recurring transactions on the dashboard"
    )
    
    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.
    
    Aggregates all sub-settings for easy access.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()
    
    @property
    def rates(self) -> ExchangeRateSettings:
        return ExchangeRateSettings()
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.
    
    Returns a dict of {setting_name: is_valid}, with an extra
    `<name>_error` entry for every section that failed to load.
    """
    results = {}
    
    settings = get_settings()
    
    for name in ("storage", "rates", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
