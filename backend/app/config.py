"""Application configuration using Pydantic Settings.

All settings are loaded from environment variables (prefix ``DSC_``)
or a .env file.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="DSC_",
    )

    # Application
    app_name: str = "DevShowcase Matching"
    app_version: str = "0.1.0"
    environment: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = Field(default=["http://localhost:3000", "http://127.0.0.1:3000"])

    # Redis (rate limiting)
    redis_url: str = "redis://localhost:6379/0"

    # Rate Limiting
    rate_limit_match_per_minute: int = 60

    # Request limits
    max_skills_per_list: int = 200
    max_batch_targets: int = 50

    # Prometheus
    metrics_enabled: bool = True

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        return v.lower()

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
