"""
Observability configuration settings.

Settings for request logging and log output format.

Dependencies: pydantic_settings
System role: Logging configuration
"""

from pydantic_settings import BaseSettings
from pydantic import Field

from gateway.configs.base import ENV_FILES


class ObservabilitySettings(BaseSettings):
    """Logging configuration."""

    log_request_bodies: bool = Field(
        default=True,
        description="Log redacted bodies of mutating NetSuite requests at DEBUG level",
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s",
        description="Log record format",
    )

    class Config:
        """Pydantic config for environment variable loading."""

        env_prefix = "LOG_"
        env_file = ENV_FILES
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"
