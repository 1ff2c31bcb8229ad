"""
Unit test conftest.py - Component-specific fixtures.

This module provides fixtures specific to unit testing:
- Service fixtures bound to the test session
- A mocked requests.Session standing in for GitHub
- A factory for canned HTTP responses
"""

from unittest.mock import Mock

import pytest
import requests

from gust_auth_core.services.identity_service import IdentityExchangeService
from gust_auth_core.services.oauth_state_service import OAuthStateManager
from gust_auth_core.services.rate_limit_service import RateLimitedValidator


class FakeClock:
    """Monotonic clock the tests can move forward by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_response():
    """Build a mock requests.Response."""

    def _make(status_code=200, json_body=None, text="", content_type="application/json"):
        response = Mock()
        response.status_code = status_code
        response.headers = {"Content-Type": content_type}
        response.text = text
        if json_body is not None:
            response.json.return_value = json_body
        else:
            response.json.side_effect = ValueError("No JSON object could be decoded")
        return response

    return _make


@pytest.fixture
def http():
    """Mocked HTTP session; tests set post/get return values."""
    return Mock(spec=requests.Session)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def state_manager(clock: FakeClock) -> OAuthStateManager:
    return OAuthStateManager(ttl_seconds=600, clock=clock)


@pytest.fixture
def identity_service(app_config, state_manager, http) -> IdentityExchangeService:
    """Identity exchange wired to the mocked HTTP session."""
    return IdentityExchangeService(app_config.oauth, state_manager=state_manager, http=http)


@pytest.fixture
def validator(db_session) -> RateLimitedValidator:
    return RateLimitedValidator(db_session)
