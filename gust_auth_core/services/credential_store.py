"""
Durable store for principals and their API credentials.

Principals are keyed by the provider's numeric user id; each principal has at
most one credential. The usage counters on a credential belong to the
rate-limited validator and are never touched here, except that handing out an
existing key records it as used.
"""

import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import CredentialConfig, get_config
from ..context.operation_context import operation
from ..context.service_decorators import handle_storage_errors
from ..db.db_credential_models import APICredential
from ..db.db_principal_models import Principal
from ..exceptions import DuplicateCredentialError, PrincipalNotFoundError
from ..schemas.credential_schema import CredentialRead
from ..schemas.principal_schema import PrincipalIdentity, PrincipalRead
from ..utils.crud_helpers import create_record, get_record, record_exists, update_record
from ..utils.datetime_utils import start_of_utc_day, utc_now
from ..utils.encryption_utils import decrypt_access_token, encrypt_access_token
from ..utils.logger import get_logger, mask_secret


class CredentialStore:
    """
    Principal and credential persistence.

    Provides:
    - Upsert of principals on every successful login
    - Get-or-create and strict create of API credentials
    - Lookup of credentials by key
    """

    def __init__(self, session: Session, config: Optional[CredentialConfig] = None):
        """Initialize with SQLAlchemy session and optional credential settings."""
        self.session = session
        self.config = config or get_config().credentials
        self.logger = get_logger()

    # ==================== PRINCIPALS ====================

    @operation()
    @handle_storage_errors("upsert_principal")
    def upsert_principal(self, identity: PrincipalIdentity) -> PrincipalRead:
        """
        Insert or refresh the principal for a provider identity.

        Mutable profile fields and the access token are overwritten and
        last_login_at is refreshed. If a concurrent login inserts the same
        external_id first, the write is retried once as an update.

        Raises:
            StorageError: If persistence fails
        """
        try:
            principal = self._write_principal(identity)
        except IntegrityError:
            self.logger.warning(
                "Principal insert race detected, retrying as update",
                extra={"external_id": identity.external_id},
            )
            principal = self._write_principal(identity)

        return PrincipalRead.model_validate(principal)

    def _write_principal(self, identity: PrincipalIdentity) -> Principal:
        fields = {
            "login": identity.login,
            "name": identity.name,
            "email": identity.email,
            "avatar_url": identity.avatar_url,
            "access_token": encrypt_access_token(self.session, identity.access_token),
            "last_login_at": utc_now(),
        }

        principal = get_record(self.session, Principal, {"external_id": identity.external_id})
        if principal is None:
            principal = create_record(
                self.session, Principal, {"external_id": identity.external_id, **fields}
            )
            self.logger.info(
                "Principal created",
                extra={"external_id": identity.external_id, "login": identity.login},
            )
            return principal

        # Assigned directly so that cleared profile fields overwrite old values
        for key, value in fields.items():
            setattr(principal, key, value)
        principal.updated_at = utc_now()
        self.session.commit()

        self.logger.info(
            "Principal refreshed",
            extra={"external_id": identity.external_id, "login": identity.login},
        )
        return principal

    @handle_storage_errors("get_principal")
    def get_principal(self, external_id: int) -> Optional[PrincipalRead]:
        """Get a principal by provider user id, or None."""
        principal = get_record(self.session, Principal, {"external_id": external_id})
        if principal is None:
            return None
        return PrincipalRead.model_validate(principal)

    @handle_storage_errors("get_principal_access_token")
    def get_principal_access_token(self, external_id: int) -> Optional[str]:
        """Decrypted provider token for server-side calls on the principal's behalf."""
        principal = get_record(self.session, Principal, {"external_id": external_id})
        if principal is None:
            return None
        return decrypt_access_token(self.session, principal.access_token)

    @operation()
    @handle_storage_errors("set_starred_repo")
    def set_starred_repo(self, external_id: int, starred: bool = True) -> PrincipalRead:
        """
        Record whether the principal has starred the project repository.

        Raises:
            PrincipalNotFoundError: If no principal has this external_id
        """
        self._require_principal(external_id)
        principal = update_record(
            self.session, Principal, {"external_id": external_id}, {"starred_repo": starred}
        )
        return PrincipalRead.model_validate(principal)

    def _require_principal(self, external_id: int) -> None:
        if not record_exists(self.session, Principal, {"external_id": external_id}):
            raise PrincipalNotFoundError(
                f"Principal not found: external_id={external_id}", external_id=external_id
            )

    # ==================== CREDENTIALS ====================

    @operation()
    @handle_storage_errors("get_or_create_credential")
    def get_or_create_credential(self, external_id: int) -> CredentialRead:
        """
        Return the principal's credential, issuing one if needed.

        An existing credential is returned with last_used_at refreshed; its
        limit and window fields are left as they are.

        Raises:
            PrincipalNotFoundError: If no principal has this external_id
            StorageError: If persistence fails
        """
        self._require_principal(external_id)

        existing = get_record(self.session, APICredential, {"principal_external_id": external_id})
        if existing is not None:
            credential = update_record(
                self.session, APICredential, {"id": existing.id}, {"last_used_at": utc_now()}
            )
            return CredentialRead.model_validate(credential)

        try:
            return self._insert_credential(external_id)
        except IntegrityError:
            # Lost a creation race; the winner's row is the answer
            existing = get_record(
                self.session, APICredential, {"principal_external_id": external_id}
            )
            if existing is None:
                raise
            self.logger.info(
                "Credential creation race resolved to existing key",
                extra={"external_id": external_id},
            )
            return CredentialRead.model_validate(existing)

    @operation()
    @handle_storage_errors("create_credential")
    def create_credential(self, external_id: int) -> CredentialRead:
        """
        Issue a credential, refusing if the principal already has one.

        Raises:
            PrincipalNotFoundError: If no principal has this external_id
            DuplicateCredentialError: If the principal already holds a credential
        """
        self._require_principal(external_id)

        if record_exists(self.session, APICredential, {"principal_external_id": external_id}):
            raise DuplicateCredentialError(external_id=external_id)

        try:
            return self._insert_credential(external_id)
        except IntegrityError as e:
            raise DuplicateCredentialError(cause=e, external_id=external_id) from e

    @handle_storage_errors("get_credential_by_key")
    def get_credential_by_key(self, api_key: str) -> Optional[CredentialRead]:
        """Get a credential by its API key, or None."""
        if not api_key:
            return None
        credential = get_record(self.session, APICredential, {"api_key": api_key})
        if credential is None:
            return None
        return CredentialRead.model_validate(credential)

    def _insert_credential(self, external_id: int) -> CredentialRead:
        api_key = self._generate_api_key()
        credential = create_record(
            self.session,
            APICredential,
            {
                "principal_external_id": external_id,
                "api_key": api_key,
                "request_count": 0,
                "daily_request_count": 0,
                "daily_reset_at": start_of_utc_day(),
                "daily_limit": self.config.daily_request_limit,
            },
        )
        self.logger.info(
            "API credential issued",
            extra={"external_id": external_id, "api_key": mask_secret(api_key)},
        )
        return CredentialRead.model_validate(credential)

    def _generate_api_key(self) -> str:
        return f"{self.config.api_key_prefix}_{uuid.uuid4()}"
