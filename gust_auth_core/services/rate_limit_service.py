"""
Per-credential daily rate limiting.

Each accepted request is counted with a single conditional UPDATE, so the
check and the increment cannot be split by a concurrent request: two
validators can neither both take the last slot nor both reset the window.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from ..context.operation_context import operation
from ..context.service_decorators import handle_storage_errors
from ..db.db_credential_models import APICredential
from ..db.db_principal_models import Principal
from ..exceptions import InvalidCredentialError, RateLimitExceededError, StorageError
from ..schemas.credential_schema import ValidationResult
from ..schemas.principal_schema import PrincipalRead
from ..utils.crud_helpers import get_record
from ..utils.datetime_utils import ensure_utc, next_reset, start_of_utc_day, utc_now
from ..utils.logger import get_logger, mask_secret


class RateLimitedValidator:
    """
    Validates API keys and counts them against their daily limit.

    The daily window opens at UTC midnight. A credential whose stored window
    started before today is reset lazily by its first request of the day.
    """

    def __init__(self, session: Session):
        self.session = session
        self.logger = get_logger()

    @operation()
    @handle_storage_errors("validate")
    def validate(self, api_key: str, now: Optional[datetime] = None) -> ValidationResult:
        """
        Accept and count one request made with `api_key`.

        Args:
            api_key: Presented API key
            now: Evaluation time, defaults to the current UTC time

        Returns:
            ValidationResult with the owning principal and the usage after this request

        Raises:
            InvalidCredentialError: If the key is unknown (nothing is mutated)
            RateLimitExceededError: If today's allowance is used up (nothing is mutated)
        """
        now = ensure_utc(now) if now is not None else utc_now()
        today = start_of_utc_day(now)

        if not api_key or get_record(self.session, APICredential, {"api_key": api_key}) is None:
            self.session.rollback()
            raise InvalidCredentialError(api_key=mask_secret(api_key))

        # First request of a new day: open today's window with this request
        reset = self.session.execute(
            update(APICredential)
            .where(APICredential.api_key == api_key)
            .where(APICredential.daily_reset_at < today)
            .values(
                daily_request_count=1,
                daily_reset_at=today,
                request_count=APICredential.request_count + 1,
                last_used_at=now,
            )
            .execution_options(synchronize_session=False)
        )

        if reset.rowcount == 0:
            counted = self.session.execute(
                update(APICredential)
                .where(APICredential.api_key == api_key)
                .where(APICredential.daily_reset_at >= today)
                .where(APICredential.daily_request_count < APICredential.daily_limit)
                .values(
                    daily_request_count=APICredential.daily_request_count + 1,
                    request_count=APICredential.request_count + 1,
                    last_used_at=now,
                )
                .execution_options(synchronize_session=False)
            )
            if counted.rowcount == 0:
                self._raise_limit_exceeded(api_key)

        credential = get_record(self.session, APICredential, {"api_key": api_key})
        self.session.refresh(credential)
        principal = get_record(
            self.session, Principal, {"external_id": credential.principal_external_id}
        )
        if principal is None:
            self.session.rollback()
            raise StorageError(
                "Credential has no owning principal",
                external_id=credential.principal_external_id,
            )

        result = ValidationResult(
            principal=PrincipalRead.model_validate(principal),
            limit=credential.daily_limit,
            used=credential.daily_request_count,
            reset_at=next_reset(credential.daily_reset_at),
        )
        self.session.commit()

        self.logger.debug(
            "API key accepted",
            extra={
                "api_key": mask_secret(api_key),
                "used": result.used,
                "limit": result.limit,
            },
        )
        return result

    def _raise_limit_exceeded(self, api_key: str) -> None:
        credential = get_record(self.session, APICredential, {"api_key": api_key})
        self.session.refresh(credential)
        limit = credential.daily_limit
        reset_at = next_reset(credential.daily_reset_at)
        self.session.rollback()
        raise RateLimitExceededError(
            limit=limit,
            reset_at=reset_at,
            api_key=mask_secret(api_key),
        )
