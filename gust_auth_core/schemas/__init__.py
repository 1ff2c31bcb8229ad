"""Pydantic schemas for principals, credentials, and authorization results."""

from .authorization_schema import AuthorizationRequest, AuthorizationResult
from .credential_schema import CredentialRead, RateLimitStatus, ValidationResult
from .principal_schema import PrincipalIdentity, PrincipalRead

__all__ = [
    "AuthorizationRequest",
    "AuthorizationResult",
    "CredentialRead",
    "PrincipalIdentity",
    "PrincipalRead",
    "RateLimitStatus",
    "ValidationResult",
]
