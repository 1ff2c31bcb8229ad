"""
Constants and enums for the Gust auth core.

This module centralizes all magic strings and constants used throughout
the library to ensure consistency and maintainability.
"""

from enum import Enum


class LogLevel(str, Enum):
    """Standard logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentVariable(str, Enum):
    """Standard environment variable names."""

    APP_ENV = "APP_ENV"
    DEBUG = "DEBUG"
    LOG_LEVEL = "LOG_LEVEL"
    DATABASE_URL = "DATABASE_URL"
    DB_PATH = "DB_PATH"
    GITHUB_CLIENT_ID = "GITHUB_CLIENT_ID"
    GITHUB_CLIENT_SECRET = "GITHUB_CLIENT_SECRET"
    GITHUB_REDIRECT_URI = "GITHUB_REDIRECT_URI"
    API_KEY_PREFIX = "API_KEY_PREFIX"
    DAILY_REQUEST_LIMIT = "DAILY_REQUEST_LIMIT"
    TOKEN_ENCRYPTION_KEY = "TOKEN_ENCRYPTION_KEY"


class LogContextKey(str, Enum):
    """Standard keys for logging context."""

    OPERATION_ID = "operation_id"
    CORRELATION_ID = "correlation_id"
    DURATION_MS = "duration_ms"
    STATUS = "status"
    ERROR_CODE = "error_code"
    SOURCE_MODULE = "source_module"
    OPERATION = "operation"
    EXTERNAL_ID = "external_id"


class RateLimitHeader(str, Enum):
    """Response headers a caller projects a validation result into."""

    LIMIT = "X-RateLimit-Limit"
    REMAINING = "X-RateLimit-Remaining"
    RESET = "X-RateLimit-Reset"


class GitHubEndpoint(str, Enum):
    """GitHub OAuth and identity endpoints."""

    AUTHORIZE = "https://github.com/login/oauth/authorize"
    ACCESS_TOKEN = "https://github.com/login/oauth/access_token"
    USER = "https://api.github.com/user"


# Numeric and string defaults
class Defaults:
    """Default values used when configuration is silent."""

    API_KEY_PREFIX = "gust"
    DAILY_REQUEST_LIMIT = 50
    OAUTH_SCOPE = "user:email,public_repo"
    REDIRECT_URI = "http://localhost:8080/api/auth/callback"
    SQLITE_DB_PATH = "gust.db"
    STATE_TOKEN_BYTES = 32


# Time-related constants (in seconds)
class Timeouts:
    """Timeout values in seconds."""

    OAUTH_STATE_TTL = 600
    EXTERNAL_API_CALL = 10
    SQLITE_BUSY = 30
    DAILY_WINDOW = 24 * 60 * 60
