"""
Unit tests for AuthorizationService.

The identity exchange is real (with a mocked HTTP session); the store runs on
the in-memory database.
"""

import pytest

from gust_auth_core.exceptions import (
    ExchangeFailedError,
    IdentityLookupFailedError,
    InvalidStateError,
    StorageError,
)
from gust_auth_core.services.authorization_service import AuthorizationService


@pytest.fixture
def service(identity_service, credential_store):
    return AuthorizationService(identity_service, credential_store)


@pytest.fixture
def github_ok(http, make_response):
    http.post.return_value = make_response(json_body={"access_token": "tok123"})
    http.get.return_value = make_response(
        json_body={"id": 555, "login": "alice", "name": "Alice", "email": "alice@example.com"}
    )
    return http


class TestBegin:
    def test_begin_returns_url_and_pending_state(self, service, state_manager):
        request = service.begin()

        assert request.url.startswith("https://github.com/login/oauth/authorize?")
        assert f"state={request.state}" in request.url
        assert state_manager.pending_count == 1


class TestComplete:
    """Test the callback pipeline."""

    def test_complete_issues_credential(self, service, github_ok):
        request = service.begin()

        result = service.complete("code-abc", request.state)

        assert result.principal.external_id == 555
        assert result.principal.login == "alice"
        assert result.credential.principal_external_id == 555
        assert result.credential.api_key.startswith("gust_")

    def test_repeat_login_returns_same_key(self, service, github_ok):
        first = service.complete("code-1")
        second = service.complete("code-2")

        assert second.credential.api_key == first.credential.api_key

    def test_state_replay_is_rejected(self, service, github_ok):
        request = service.begin()
        service.complete("code-abc", request.state)

        with pytest.raises(InvalidStateError):
            service.complete("code-abc", request.state)

    def test_exchange_failure_creates_nothing(
        self, service, http, make_response, credential_store
    ):
        http.post.return_value = make_response(
            json_body={"error": "bad_verification_code", "error_description": "expired"}
        )

        with pytest.raises(ExchangeFailedError, match="expired"):
            service.complete("stale")

        http.get.assert_not_called()
        assert credential_store.get_principal(555) is None

    def test_identity_failure_creates_nothing(
        self, service, http, make_response, credential_store
    ):
        http.post.return_value = make_response(json_body={"access_token": "tok123"})
        http.get.return_value = make_response(status_code=500, json_body={})

        with pytest.raises(IdentityLookupFailedError):
            service.complete("code-abc")

        assert credential_store.get_principal(555) is None

    def test_storage_failure_propagates(self, service, github_ok, credential_store, monkeypatch):
        def broken(identity):
            raise StorageError("disk full")

        monkeypatch.setattr(credential_store, "upsert_principal", broken)

        with pytest.raises(StorageError, match="disk full"):
            service.complete("code-abc")
