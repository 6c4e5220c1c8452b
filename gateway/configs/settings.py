"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from gateway.configs.base import BaseSettings
from gateway.configs.netsuite import NetSuiteSettings
from gateway.configs.observability import ObservabilitySettings
from gateway.configs.security import SecuritySettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    netsuite: NetSuiteSettings = Field(default_factory=NetSuiteSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from gateway.configs import get_settings
        settings = get_settings()
    """
    return Settings()
