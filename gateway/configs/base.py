"""
Base configuration settings.

Provides common configuration inherited by the aggregated settings class.
Handles environment detection and shared defaults.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict
from pydantic import Field

# Later files take priority, so .env.local overrides .env
ENV_FILES = (".env", ".env.local")


class BaseSettings(PydanticBaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILES,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Application environment (development, staging, production)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    port: int = Field(
        default=3333,
        description="Port the HTTP server listens on",
    )

    @property
    def is_production(self) -> bool:
        """Whether verbose diagnostics must be withheld from responses."""
        return self.environment.lower() == "production"
