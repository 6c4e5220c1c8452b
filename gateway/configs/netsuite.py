"""
NetSuite configuration settings.

SuiteQL endpoint, OAuth 1.0a token-based authentication credentials and the
subsidiary customer lookups are scoped to.

Dependencies: pydantic, pydantic_settings
System role: Outbound NetSuite client configuration
"""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from gateway.configs.base import ENV_FILES


class NetSuiteSettings(BaseSettings):
    """NetSuite SuiteQL connection configuration."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILES,
        env_file_encoding="utf-8",
        env_prefix="NS_",
        case_sensitive=False,
        extra="ignore",
    )

    suiteql_base_url: str | None = Field(
        default=None,
        description="Base URL of the SuiteQL REST query service",
    )
    consumer_key: SecretStr | None = Field(default=None, description="Integration consumer key")
    consumer_secret: SecretStr | None = Field(default=None, description="Integration consumer secret")
    access_token: SecretStr | None = Field(default=None, description="Token-based auth token id")
    token_secret: SecretStr | None = Field(default=None, description="Token-based auth token secret")
    oauth_realm: str | None = Field(default=None, description="NetSuite account id used as OAuth realm")
    signature_method: str = Field(default="HMAC-SHA256", description="OAuth signature method")

    subsidiary_id: int = Field(default=2, description="Subsidiary customer lookups are scoped to")
    request_timeout_seconds: float = Field(
        default=30.0,
        description="Hard deadline for a single SuiteQL request",
    )
