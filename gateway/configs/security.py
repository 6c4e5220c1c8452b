"""
Request security configuration settings.

API key allow-list, request size limits, rate limiting and CORS origins.

Dependencies: pydantic, pydantic_settings
System role: Inbound request control configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gateway.configs.base import ENV_FILES


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class SecuritySettings(BaseSettings):
    """Inbound request controls."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILES,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    allowed_api_keys: str = Field(
        default="",
        description="Comma-separated API keys accepted on protected routes (empty disables the check)",
    )
    max_body_size: int = Field(default=1_048_576, description="Maximum request body size in bytes")
    rate_limit_max: int = Field(default=100, description="Requests allowed per client per window")
    rate_limit_window_ms: int = Field(default=60_000, description="Rate limit window length in milliseconds")
    allowed_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated origins allowed for cross-origin requests",
    )

    @property
    def api_keys(self) -> frozenset[str]:
        """Allowed API keys as a set."""
        return frozenset(_split_csv(self.allowed_api_keys))

    @property
    def origins(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return _split_csv(self.allowed_origins)

    @property
    def rate_limit_window_seconds(self) -> float:
        """Rate limit window length in seconds."""
        return self.rate_limit_window_ms / 1000
