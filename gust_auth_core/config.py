"""
Centralized configuration management for the Gust auth core.

This module provides a unified configuration system with support for:
- Environment variables
- GitHub OAuth application settings
- Credential issuance and rate-limit defaults
- Validation using Pydantic
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .constants import Defaults, EnvironmentVariable, GitHubEndpoint, LogLevel, Timeouts
from .exceptions import ErrorCode, ValidationError


class OAuthConfig(BaseModel):
    """GitHub OAuth application configuration."""

    client_id: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.GITHUB_CLIENT_ID.value, ""),
        description="GitHub OAuth application client id",
    )
    client_secret: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.GITHUB_CLIENT_SECRET.value, ""),
        description="GitHub OAuth application client secret",
    )
    redirect_uri: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.GITHUB_REDIRECT_URI.value, Defaults.REDIRECT_URI
        ),
        description="Callback URI registered with the provider",
    )
    authorize_url: str = Field(
        default=GitHubEndpoint.AUTHORIZE.value, description="Authorize-redirect endpoint"
    )
    token_url: str = Field(
        default=GitHubEndpoint.ACCESS_TOKEN.value, description="Code-for-token endpoint"
    )
    user_url: str = Field(default=GitHubEndpoint.USER.value, description="Identity endpoint")
    scope: str = Field(default=Defaults.OAUTH_SCOPE, description="Requested OAuth scopes")
    request_timeout: float = Field(
        default=Timeouts.EXTERNAL_API_CALL, description="Provider request timeout in seconds"
    )
    state_ttl_seconds: int = Field(
        default=Timeouts.OAUTH_STATE_TTL, description="Lifetime of a pending OAuth state"
    )

    @field_validator("state_ttl_seconds")
    def validate_state_ttl(cls, v: int) -> int:
        """State lifetime must be positive."""
        if v <= 0:
            raise ValueError("state_ttl_seconds must be positive")
        return v

    @property
    def is_configured(self) -> bool:
        """Whether both client credentials are present."""
        return bool(self.client_id and self.client_secret)

    def require_configured(self) -> None:
        """Raise if the OAuth application credentials are missing."""
        if not self.is_configured:
            raise ValidationError(
                "GITHUB_CLIENT_ID and GITHUB_CLIENT_SECRET must be set",
                field="oauth",
                error_code=ErrorCode.CONFIGURATION_ERROR,
            )


class CredentialConfig(BaseModel):
    """Configuration for issued API credentials."""

    api_key_prefix: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.API_KEY_PREFIX.value, Defaults.API_KEY_PREFIX
        ),
        description="Prefix prepended to every issued API key",
    )
    daily_request_limit: int = Field(
        default_factory=lambda: int(
            os.getenv(
                EnvironmentVariable.DAILY_REQUEST_LIMIT.value, str(Defaults.DAILY_REQUEST_LIMIT)
            )
        ),
        description="Requests allowed per credential per UTC day",
    )

    @field_validator("api_key_prefix")
    def validate_prefix(cls, v: str) -> str:
        """Prefix must be a non-empty token without the separator."""
        v = v.strip()
        if not v or "_" in v:
            raise ValueError("api_key_prefix must be non-empty and must not contain '_'")
        return v

    @field_validator("daily_request_limit")
    def validate_daily_limit(cls, v: int) -> int:
        """Daily limit must be positive."""
        if v <= 0:
            raise ValueError("daily_request_limit must be positive")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.LOG_LEVEL.value, LogLevel.INFO.value),
        description="Logging level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )

    @field_validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {level.value for level in LogLevel}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class SecurityConfig(BaseModel):
    """Security-related configuration."""

    token_encryption_key: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.TOKEN_ENCRYPTION_KEY.value, "gust_provider_token_key"
        ),
        description="Symmetric key used for pgcrypto encryption of provider tokens",
    )


class AppConfig(BaseModel):
    """Main application configuration."""

    environment: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.APP_ENV.value, "development"),
        description="Application environment",
    )
    debug: bool = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.DEBUG.value, "false").lower()
        == "true",
        description="Debug mode",
    )

    # Sub-configurations
    oauth: OAuthConfig = Field(default_factory=OAuthConfig, description="OAuth configuration")
    credentials: CredentialConfig = Field(
        default_factory=CredentialConfig, description="Credential configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security configuration"
    )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        return cls()


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
