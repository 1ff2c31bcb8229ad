"""Services for the OAuth handshake, credential storage, and rate limiting."""

from .authorization_service import AuthorizationService
from .credential_store import CredentialStore
from .identity_service import IdentityExchangeService
from .oauth_state_service import OAuthStateManager
from .rate_limit_service import RateLimitedValidator

__all__ = [
    "AuthorizationService",
    "CredentialStore",
    "IdentityExchangeService",
    "OAuthStateManager",
    "RateLimitedValidator",
]
