"""OAuth-gated API credential issuance and validation for the Gust weather proxy."""

from .config import AppConfig, get_config, reset_config, set_config
from .exceptions import (
    BaseError,
    DuplicateCredentialError,
    ErrorCode,
    ExchangeFailedError,
    IdentityLookupFailedError,
    InvalidCredentialError,
    InvalidStateError,
    PrincipalNotFoundError,
    RateLimitExceededError,
    StorageError,
)
from .schemas import (
    AuthorizationRequest,
    AuthorizationResult,
    CredentialRead,
    PrincipalIdentity,
    PrincipalRead,
    RateLimitStatus,
    ValidationResult,
)
from .services import (
    AuthorizationService,
    CredentialStore,
    IdentityExchangeService,
    OAuthStateManager,
    RateLimitedValidator,
)

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "get_config",
    "reset_config",
    "set_config",
    "BaseError",
    "DuplicateCredentialError",
    "ErrorCode",
    "ExchangeFailedError",
    "IdentityLookupFailedError",
    "InvalidCredentialError",
    "InvalidStateError",
    "PrincipalNotFoundError",
    "RateLimitExceededError",
    "StorageError",
    "AuthorizationRequest",
    "AuthorizationResult",
    "CredentialRead",
    "PrincipalIdentity",
    "PrincipalRead",
    "RateLimitStatus",
    "ValidationResult",
    "AuthorizationService",
    "CredentialStore",
    "IdentityExchangeService",
    "OAuthStateManager",
    "RateLimitedValidator",
]
