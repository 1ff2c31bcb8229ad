"""
Test fixtures for the auth core.

This module provides shared test fixtures including database setup,
a deterministic application config, and canned provider identities.
"""

import pytest
from sqlalchemy.orm import Session

from gust_auth_core.config import (
    AppConfig,
    CredentialConfig,
    OAuthConfig,
    reset_config,
    set_config,
)
from gust_auth_core.db import DatabaseConfig, DatabaseManager, import_all_models
from gust_auth_core.db.db_config import Base, initialize_db
from gust_auth_core.schemas.principal_schema import PrincipalIdentity
from gust_auth_core.services.credential_store import CredentialStore


@pytest.fixture(autouse=True)
def app_config() -> AppConfig:
    """Install a known configuration for every test and drop it afterwards."""
    config = AppConfig(
        environment="test",
        oauth=OAuthConfig(
            client_id="test-client-id",
            client_secret="test-client-secret",
            redirect_uri="http://localhost:8080/api/auth/callback",
        ),
        credentials=CredentialConfig(api_key_prefix="gust", daily_request_limit=50),
    )
    set_config(config)
    yield config
    reset_config()


@pytest.fixture(scope="session")
def db_config() -> DatabaseConfig:
    """Create SQLite in-memory database configuration for testing."""
    return DatabaseConfig(
        db_type="sqlite",
        database=":memory:",
        echo=False,
        development_mode=True,
    )


@pytest.fixture(scope="session")
def db_manager(db_config: DatabaseConfig) -> DatabaseManager:
    """Create and initialize database manager with all models."""
    import_all_models()
    return initialize_db(db_config)


@pytest.fixture(scope="function")
def db_session(db_manager: DatabaseManager) -> Session:
    """
    Create a database session for each test.

    Tables are created before and dropped after each test so that no rows
    leak between tests.
    """
    Base.metadata.create_all(db_manager.engine)
    session = db_manager.get_session()

    yield session

    session.rollback()
    db_manager.close_session()
    Base.metadata.drop_all(db_manager.engine)


@pytest.fixture
def identity() -> PrincipalIdentity:
    """Identity the provider returns for the standard test user."""
    return PrincipalIdentity(
        external_id=555,
        login="alice",
        name="Alice Example",
        email="alice@example.com",
        avatar_url="https://avatars.githubusercontent.com/u/555",
        access_token="tok123",
    )


@pytest.fixture
def credential_store(db_session: Session) -> CredentialStore:
    """Credential store bound to the test session."""
    return CredentialStore(db_session)
