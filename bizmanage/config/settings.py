"""
BizManage Pro
Centralized Configuration Management

Pydantic settings with environment variable support, validation, and type safety.
Each section reads its own environment prefix; `Settings` aggregates them.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Data store configuration"""

    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    url: str = Field(
        default="sqlite+aiosqlite:///./bizmanage.db",
        description="Async SQLAlchemy database URL",
    )
    echo: bool = Field(default=False, description="Echo SQL queries")


class AISettings(BaseSettings):
    """Anthropic completion API configuration"""

    model_config = SettingsConfigDict(env_prefix="ANTHROPIC_")

    api_key: Optional[SecretStr] = Field(default=None, description="Anthropic API key")
    model: str = Field(default="claude-3-7-sonnet-20250219", description="Model used for insights")
    max_tokens: int = Field(default=3000, description="Completion token limit")
    temperature: float = Field(default=0.2, description="Sampling temperature")
    timeout_seconds: float = Field(default=60.0, description="Request timeout in seconds")
    max_retries: int = Field(default=2, description="Client-side retries on transient errors")

    @property
    def is_configured(self) -> bool:
        """True when a non-empty API key is set."""
        return self.api_key is not None and bool(self.api_key.get_secret_value().strip())


class InventorySettings(BaseSettings):
    """Stock level thresholds"""

    model_config = SettingsConfigDict(env_prefix="")

    low_stock_threshold: int = Field(
        default=10,
        alias="LOW_STOCK_THRESHOLD",
        description="Default threshold for low-stock listings in the API",
    )
    insights_low_stock_threshold: int = Field(
        default=5,
        alias="INSIGHTS_LOW_STOCK_THRESHOLD",
        description="Threshold used when building inventory insights",
    )


class SecuritySettings(BaseSettings):
    """CORS configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        alias="CORS_ORIGINS",
        description="Allowed CORS origins",
    )


class MonitoringSettings(BaseSettings):
    """Logging configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format: json or console")

    @field_validator("log_format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        allowed = ["json", "console"]
        if v.lower() not in allowed:
            raise ValueError(f"Log format must be one of: {allowed}")
        return v.lower()


class SeedSettings(BaseSettings):
    """Startup data seeding"""

    model_config = SettingsConfigDict(env_prefix="SEED_")

    admin_username: str = Field(default="admin", description="Default admin username")
    admin_password: SecretStr = Field(default=SecretStr("admin123"), description="Default admin password")
    admin_email: str = Field(default="admin@bizmanagepro.com", description="Default admin email")
    demo_data: bool = Field(default=False, description="Populate demo branches, products and orders")
    demo_seed: int = Field(default=42, description="Random seed for demo data")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="bizmanage-pro", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")
    api_workers: int = Field(default=4, alias="API_WORKERS", description="API workers")

    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    ai: AISettings = Field(default_factory=AISettings)
    inventory: InventorySettings = Field(default_factory=InventorySettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    seed: SeedSettings = Field(default_factory=SeedSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
