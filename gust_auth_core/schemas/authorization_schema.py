"""Schemas returned by the authorization pipeline."""

from pydantic import BaseModel, Field

from .credential_schema import CredentialRead
from .principal_schema import PrincipalRead


class AuthorizationRequest(BaseModel):
    """Where to send the browser, and the state it must bring back."""

    url: str
    state: str = Field(..., repr=False)


class AuthorizationResult(BaseModel):
    """Principal and credential produced by a completed handshake."""

    principal: PrincipalRead
    credential: CredentialRead
