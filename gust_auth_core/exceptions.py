"""
Consolidated exception system with error codes, context, and correlation support.

This module provides a unified exception hierarchy for the entire library,
with automatic logging and correlation ID tracking. Every failure the auth
core can produce is one of the typed errors below, so callers at the HTTP
boundary can map them to status codes without string matching.
"""

import threading
import traceback
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

# Thread-local storage for correlation ID
_thread_local = threading.local()


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # System errors (1xxx)
    INTERNAL_ERROR = "1000"
    DATABASE_ERROR = "1001"
    CONFIGURATION_ERROR = "1003"

    # Validation errors (2xxx)
    VALIDATION_FAILED = "2000"
    INVALID_FORMAT = "2001"
    MISSING_REQUIRED = "2002"

    # Resource errors (3xxx)
    NOT_FOUND = "3000"
    DUPLICATE = "3001"
    LIMIT_EXCEEDED = "3005"

    # Business logic errors (4xxx)
    UNAUTHORIZED = "4005"
    INVALID_STATE = "4006"

    # External service errors (5xxx)
    EXTERNAL_API_ERROR = "5002"


class BaseError(Exception):
    """Base exception with context, error codes, logging, and error chaining."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        """
        Initialize base error with rich context.

        Args:
            message: Human-readable error message
            error_code: Standardized error code from ErrorCode enum
            status_code: HTTP status code for API responses
            cause: Original exception that caused this error
            **context: Additional context information
        """
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.error_id = str(uuid.uuid4())
        self.context = context

        correlation_id = get_correlation_id()
        if correlation_id:
            self.context["correlation_id"] = correlation_id

        self.context["error_id"] = self.error_id

        if cause:
            self.context["cause"] = {
                "type": type(cause).__name__,
                "message": str(cause),
                "traceback": traceback.format_exception(type(cause), cause, cause.__traceback__),
            }

        self._log_error()

        super().__init__(message)

    def _log_error(self) -> None:
        """Log error with appropriate level based on status code."""
        # Imported here to avoid a circular import at module load time
        from .utils.logger import get_logger

        logger = get_logger()

        log_data = {
            "error_id": self.error_id,
            "error_code": self.error_code.value,
            "status_code": self.status_code,
            "error_message": self.message,
            "timestamp": self.timestamp,
            "context": {k: v for k, v in self.context.items() if k not in ["cause", "traceback"]},
        }

        if "correlation_id" in self.context:
            log_data["correlation_id"] = self.context["correlation_id"]

        if self.status_code >= 500:
            logger.error(
                f"Error {self.error_code.value}: {self.message}",
                extra=log_data,
                exc_info=self.cause,
            )
        elif self.status_code >= 400:
            logger.warning(f"Client error {self.error_code.value}: {self.message}", extra=log_data)
        else:
            logger.info(f"Error {self.error_code.value}: {self.message}", extra=log_data)

    def to_dict(
        self, include_cause: bool = False, include_traceback: bool = False
    ) -> Dict[str, Any]:
        """
        Convert to dict for API responses.

        Args:
            include_cause: Include cause information (useful for debugging)
            include_traceback: Include full traceback (only in debug mode)

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        result: Dict[str, Any] = {
            "error": {
                "id": self.error_id,
                "code": self.error_code.value,
                "message": self.message,
                "timestamp": self.timestamp,
                "context": {
                    k: v
                    for k, v in self.context.items()
                    if k not in ["cause", "error_id", "correlation_id"]
                },
            }
        }

        if "correlation_id" in self.context:
            result["error"]["correlation_id"] = self.context["correlation_id"]

        if include_cause and "cause" in self.context:
            result["error"]["cause"] = {
                "type": self.context["cause"]["type"],
                "message": self.context["cause"]["message"],
            }
            if include_traceback:
                result["error"]["cause"]["traceback"] = self.context["cause"]["traceback"]

        return result

    def add_context(self, **kwargs: Any) -> "BaseError":
        """
        Add additional context to the error (fluent interface).

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self

    @property
    def error_chain(self) -> List[Exception]:
        """Get the full chain of errors."""
        chain: List[Exception] = [self]
        current = self.cause
        while current:
            chain.append(current)
            current = getattr(current, "cause", None)
        return chain


# Layer-specific base exceptions
class RepositoryError(BaseError):
    """Repository layer errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
        status_code: int = 500,
        cause: Optional[Exception] = None,
        **context,
    ):
        """Initialize repository error with database context."""
        super().__init__(message, error_code, status_code, cause, **context)


class ServiceError(BaseError):
    """Service layer errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        operation: Optional[str] = None,
        cause: Optional[Exception] = None,
        **context,
    ):
        """Initialize service error with operation context."""
        if operation:
            context["operation"] = operation
        super().__init__(message, error_code, 500, cause, **context)


class ValidationError(BaseError):
    """Validation errors."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_FAILED,
        cause: Optional[Exception] = None,
        **context,
    ):
        """Initialize validation error with field context."""
        if field:
            context["field"] = field
        super().__init__(message, error_code, 400, cause, **context)


class ExternalServiceError(BaseError):
    """External service integration errors."""

    def __init__(
        self,
        message: str,
        service_name: str,
        error_code: ErrorCode = ErrorCode.EXTERNAL_API_ERROR,
        status_code: int = 502,
        cause: Optional[Exception] = None,
        **context,
    ):
        """Initialize external service error with service context."""
        context["service_name"] = service_name
        super().__init__(message, error_code, status_code, cause, **context)


# ==================== HANDSHAKE EXCEPTIONS ====================


class ExchangeFailedError(ExternalServiceError):
    """Raised when an authorization code cannot be traded for an access token."""

    def __init__(
        self,
        message: str = "OAuth code exchange failed",
        service_name: str = "github",
        **kwargs,
    ):
        super().__init__(message=message, service_name=service_name, **kwargs)


class InvalidStateError(ExchangeFailedError):
    """Raised when an OAuth state is unknown, expired, or already consumed.

    The handshake has to restart from a freshly issued authorization URL.
    """

    def __init__(self, message: str = "Invalid OAuth state parameter", **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_STATE,
            status_code=400,
            **kwargs,
        )


class IdentityLookupFailedError(ExternalServiceError):
    """Raised when an access token cannot be resolved to a provider identity."""

    def __init__(
        self,
        message: str = "Identity lookup failed",
        service_name: str = "github",
        **kwargs,
    ):
        super().__init__(message=message, service_name=service_name, **kwargs)


# ==================== CREDENTIAL STORE EXCEPTIONS ====================


class StorageError(RepositoryError):
    """Raised when the durable store fails; fatal to the current request."""

    def __init__(self, message: str = "Storage operation failed", **kwargs):
        super().__init__(message=message, error_code=ErrorCode.DATABASE_ERROR, **kwargs)


class PrincipalNotFoundError(RepositoryError):
    """Raised when a credential is requested for a principal that does not exist."""

    def __init__(self, message: str = "Principal not found", **kwargs):
        super().__init__(
            message=message, error_code=ErrorCode.NOT_FOUND, status_code=404, **kwargs
        )


class DuplicateCredentialError(RepositoryError):
    """Raised when a second credential is requested for the same principal."""

    def __init__(self, message: str = "Principal already has an API key", **kwargs):
        super().__init__(
            message=message, error_code=ErrorCode.DUPLICATE, status_code=409, **kwargs
        )


# ==================== VALIDATION EXCEPTIONS ====================


class InvalidCredentialError(BaseError):
    """Raised when a presented API key is not known to the store."""

    def __init__(self, message: str = "Invalid API key", **kwargs):
        super().__init__(
            message=message, error_code=ErrorCode.UNAUTHORIZED, status_code=401, **kwargs
        )


class RateLimitExceededError(BaseError):
    """Raised when a credential has used its daily allowance.

    Carries the throttling metadata so the boundary layer can answer with a
    429 and rate-limit headers instead of a generic auth failure.
    """

    def __init__(
        self,
        limit: int,
        reset_at: datetime,
        message: Optional[str] = None,
        **kwargs,
    ):
        self.limit = limit
        self.remaining = 0
        self.reset_at = reset_at
        super().__init__(
            message=message
            or f"Daily rate limit of {limit} requests exceeded. Resets at {reset_at.isoformat()}",
            error_code=ErrorCode.LIMIT_EXCEEDED,
            status_code=429,
            limit=limit,
            remaining=0,
            reset_at=reset_at.isoformat(),
            **kwargs,
        )

    def rate_limit_headers(self) -> Dict[str, str]:
        """Project the throttling metadata into X-RateLimit-* headers."""
        from .utils.datetime_utils import format_rfc3339

        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": format_rfc3339(self.reset_at),
        }


# Factory functions for common error patterns
def not_found(
    resource_type: str, cause: Optional[Exception] = None, **identifiers
) -> RepositoryError:
    """
    Factory for not found errors.

    Args:
        resource_type: Type of resource (e.g., 'Principal', 'APICredential')
        cause: Original exception if any
        **identifiers: Resource identifiers (e.g., external_id=123)

    Returns:
        Configured RepositoryError instance with 404 status
    """
    id_parts = [f"{k}={v}" for k, v in identifiers.items()]
    message = f"{resource_type} not found"
    if id_parts:
        message += f": {', '.join(id_parts)}"

    return RepositoryError(
        message,
        error_code=ErrorCode.NOT_FOUND,
        status_code=404,
        cause=cause,
        resource_type=resource_type,
        **identifiers,
    )


# Correlation ID management
def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current thread."""
    _thread_local.correlation_id = correlation_id


def get_correlation_id() -> Optional[str]:
    """Get the current thread's correlation ID."""
    return getattr(_thread_local, "correlation_id", None)


def clear_correlation_id() -> None:
    """Clear the current thread's correlation ID."""
    if hasattr(_thread_local, "correlation_id"):
        delattr(_thread_local, "correlation_id")
