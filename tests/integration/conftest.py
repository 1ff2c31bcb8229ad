"""
Integration test conftest.py - End-to-end fixtures.

Provides a file-backed SQLite database for tests that need several
connections at once, and a scripted stand-in for GitHub's HTTP endpoints.
"""

from unittest.mock import Mock

import pytest
import requests

from gust_auth_core.db import DatabaseConfig, DatabaseManager, import_all_models


@pytest.fixture
def file_db_manager(tmp_path) -> DatabaseManager:
    """Database manager over a throwaway SQLite file."""
    import_all_models()
    manager = DatabaseManager(
        DatabaseConfig(
            db_type="sqlite",
            database=str(tmp_path / "gust.db"),
            development_mode=True,
        )
    )
    manager.create_tables()

    yield manager

    manager.drop_tables()
    manager.close()


def github_response(json_body, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.headers = {"Content-Type": "application/json"}
    response.text = ""
    response.json.return_value = json_body
    return response


@pytest.fixture
def github():
    """
    Mocked requests.Session answering like GitHub for user 555.

    Tests override `github.user` to change what /user reports.
    """
    http = Mock(spec=requests.Session)
    http.user = {
        "id": 555,
        "login": "alice",
        "name": "Alice Example",
        "email": "alice@example.com",
        "avatar_url": "https://avatars.githubusercontent.com/u/555",
    }
    http.post.side_effect = lambda *args, **kwargs: github_response(
        {"access_token": "tok123", "token_type": "bearer", "scope": "user:email"}
    )
    http.get.side_effect = lambda *args, **kwargs: github_response(http.user)
    return http
