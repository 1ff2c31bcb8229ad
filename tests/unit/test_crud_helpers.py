"""
Unit tests for CRUD helper functions.

Uses the Principal model as the example record type.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gust_auth_core.db import Principal
from gust_auth_core.exceptions import ErrorCode, RepositoryError
from gust_auth_core.utils.crud_helpers import (
    create_record,
    get_record,
    record_exists,
    update_record,
)


def _principal_data(external_id: int = 555, login: str = "alice") -> dict:
    return {
        "external_id": external_id,
        "login": login,
        "access_token": "tok123",
        "last_login_at": datetime.now(timezone.utc),
    }


class TestCreateRecord:
    """Test create_record function."""

    def test_create_sets_timestamps(self, db_session: Session):
        principal = create_record(db_session, Principal, _principal_data())

        assert principal.id is not None
        assert principal.created_at is not None
        assert principal.updated_at is not None
        assert abs((principal.created_at - principal.updated_at).total_seconds()) < 1

    def test_unique_violation_is_reraised(self, db_session: Session):
        """Integrity errors propagate so callers can map them."""
        create_record(db_session, Principal, _principal_data())

        with pytest.raises(IntegrityError):
            create_record(db_session, Principal, _principal_data(login="impostor"))

        assert db_session.query(Principal).count() == 1


class TestGetRecord:
    """Test get_record function."""

    def test_get_by_filters(self, db_session: Session):
        create_record(db_session, Principal, _principal_data())

        found = get_record(db_session, Principal, {"external_id": 555, "login": "alice"})

        assert found is not None
        assert found.login == "alice"

    def test_get_missing(self, db_session: Session):
        assert get_record(db_session, Principal, {"external_id": 1}) is None

    def test_record_exists(self, db_session: Session):
        create_record(db_session, Principal, _principal_data())

        assert record_exists(db_session, Principal, {"external_id": 555}) is True
        assert record_exists(db_session, Principal, {"external_id": 556}) is False


class TestUpdateRecord:
    """Test update_record function."""

    def test_update_fields(self, db_session: Session):
        create_record(db_session, Principal, _principal_data())

        updated = update_record(
            db_session, Principal, {"external_id": 555}, {"login": "alice2", "name": None}
        )

        assert updated.login == "alice2"

    def test_update_missing_record(self, db_session: Session):
        with pytest.raises(RepositoryError) as exc_info:
            update_record(db_session, Principal, {"external_id": 404}, {"login": "x"})

        assert exc_info.value.error_code == ErrorCode.NOT_FOUND
        assert exc_info.value.status_code == 404
