"""
Sales Integration Engine
Centralized Configuration Management

Engine configuration using Pydantic settings with environment variable
support, validation, and type safety.
"""

from datetime import date
from functools import lru_cache
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEDUP_STRATEGIES = ("keep_first", "keep_latest")


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="text", alias="LOG_FORMAT", description="Log format: json or text")

    @field_validator("log_format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format value"""
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class ValidationSettings(BaseSettings):
    """Integrity Validation Configuration"""

    model_config = SettingsConfigDict(env_prefix="VALIDATION_")

    min_order_date: date = Field(default=date(2015, 1, 1), description="Earliest acceptable order date")
    max_order_date: date = Field(default=date(2030, 12, 31), description="Latest acceptable order date")
    strict_mode: bool = Field(default=False, description="Treat warnings as failures")

    @model_validator(mode="after")
    def validate_range(self) -> "ValidationSettings":
        """Validate that the order date window is not inverted"""
        if self.min_order_date > self.max_order_date:
            raise ValueError("min_order_date must not be after max_order_date")
        return self


class DedupSettings(BaseSettings):
    """Deduplication Policy Configuration"""

    model_config = SettingsConfigDict(env_prefix="DEDUP_")

    default_strategy: str = Field(default="keep_first", description="Strategy for entities without an override")
    customer_strategy: str = Field(default="keep_latest", description="Strategy for customer records")

    @field_validator("default_strategy", "customer_strategy")
    @classmethod
    def validate_strategy(cls, v: str) -> str:
        """Validate strategy name"""
        if v.lower() not in DEDUP_STRATEGIES:
            raise ValueError(f"Strategy must be one of: {list(DEDUP_STRATEGIES)}")
        return v.lower()


class Settings(BaseSettings):
    """
    Main Engine Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing engine configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # Subsystem configurations
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    dedup: DedupSettings = Field(default_factory=DedupSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached engine settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Engine settings instance
    """
    return Settings()
