"""
The OAuth callback pipeline as a single library call.

begin() produces the redirect for the login button; complete() runs
exchange -> identity -> principal upsert -> credential issuance for the
callback. Errors from each step propagate unchanged.
"""

from typing import Optional

from ..context.operation_context import operation
from ..schemas.authorization_schema import AuthorizationRequest, AuthorizationResult
from ..utils.logger import get_logger, mask_secret
from .credential_store import CredentialStore
from .identity_service import IdentityExchangeService


class AuthorizationService:
    """Composes the identity exchange and the credential store."""

    def __init__(self, identity_service: IdentityExchangeService, store: CredentialStore):
        self.identity_service = identity_service
        self.store = store
        self.logger = get_logger()

    def begin(self, redirect_uri: Optional[str] = None) -> AuthorizationRequest:
        url, state = self.identity_service.authorization_url(redirect_uri)
        return AuthorizationRequest(url=url, state=state)

    @operation()
    def complete(
        self, code: str, state: str = "", redirect_uri: Optional[str] = None
    ) -> AuthorizationResult:
        """
        Finish a handshake and hand back the principal's API credential.

        Raises:
            InvalidStateError: If the state is not pending
            ExchangeFailedError: If the code cannot be exchanged
            IdentityLookupFailedError: If the token cannot be resolved to a user
            StorageError: If persistence fails
        """
        access_token = self.identity_service.exchange_code(code, state, redirect_uri)
        identity = self.identity_service.resolve_identity(access_token)
        principal = self.store.upsert_principal(identity)
        credential = self.store.get_or_create_credential(principal.external_id)

        self.logger.info(
            "Authorization completed",
            extra={
                "external_id": principal.external_id,
                "login": principal.login,
                "api_key": mask_secret(credential.api_key),
            },
        )
        return AuthorizationResult(principal=principal, credential=credential)
