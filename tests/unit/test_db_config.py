"""
Unit tests for database configuration and the global manager.
"""

import pytest

from gust_auth_core.db import db_config as db_config_module
from gust_auth_core.db.db_config import (
    DatabaseConfig,
    DatabaseManager,
    get_db_manager,
    get_development_config,
    get_production_config,
)
from gust_auth_core.exceptions import ErrorCode, ServiceError, ValidationError


class TestDatabaseConfig:
    """Test connection string construction."""

    def test_sqlite_file(self):
        config = DatabaseConfig(db_type="sqlite", database="/tmp/gust.db")

        assert config.get_connection_string() == "sqlite:////tmp/gust.db"
        assert config.is_sqlite is True

    def test_sqlite_defaults_to_memory(self):
        assert DatabaseConfig(db_type="sqlite").get_connection_string() == "sqlite:///:memory:"

    def test_postgres(self):
        config = DatabaseConfig(
            db_type="postgres", host="db", database="gust", username="gust", password="pw"
        )

        assert config.get_connection_string() == "postgresql://gust:pw@db:5432/gust"
        assert config.is_sqlite is False

    def test_postgres_missing_parameters(self):
        with pytest.raises(ValidationError) as exc_info:
            DatabaseConfig(db_type="postgres", host="db").get_connection_string()

        assert exc_info.value.error_code == ErrorCode.MISSING_REQUIRED

    def test_unsupported_type(self):
        with pytest.raises(ValidationError) as exc_info:
            DatabaseConfig(db_type="oracle").get_connection_string()

        assert exc_info.value.error_code == ErrorCode.INVALID_FORMAT

    def test_explicit_url_wins(self):
        config = DatabaseConfig(db_type="postgres", url="sqlite:///override.db")

        assert config.get_connection_string() == "sqlite:///override.db"
        assert config.is_sqlite is True

    def test_repr_masks_password(self):
        config = DatabaseConfig(password="hunter2", url="postgresql://u:hunter2@h/d")

        assert "hunter2" not in repr(config)


class TestEnvironmentConfigs:
    """Test configs built from the environment."""

    def test_development_config(self, monkeypatch):
        monkeypatch.setenv("DB_PATH", "/tmp/dev.db")

        config = get_development_config()

        assert config.db_type == "sqlite"
        assert config.database == "/tmp/dev.db"
        assert config.development_mode is True

    def test_production_config_prefers_database_url(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://gust:pw@db:5432/gust")

        config = get_production_config()

        assert config.get_connection_string() == "postgresql://gust:pw@db:5432/gust"
        assert config.development_mode is False

    def test_production_config_from_parts(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("DB_HOST", "db.internal")
        monkeypatch.setenv("DB_PASSWORD", "pw")

        config = get_production_config()

        assert config.db_type == "postgres"
        assert config.host == "db.internal"


class TestDatabaseManager:
    """Test the manager and the global accessor."""

    def test_drop_tables_requires_development_mode(self, tmp_path):
        manager = DatabaseManager(
            DatabaseConfig(db_type="sqlite", database=str(tmp_path / "prod.db"))
        )

        with pytest.raises(ServiceError):
            manager.drop_tables()

        manager.close()

    def test_new_session_is_bound_to_engine(self, tmp_path):
        manager = DatabaseManager(DatabaseConfig(db_type="sqlite", database=str(tmp_path / "t.db")))

        session = manager.new_session()
        assert session.bind is manager.engine
        session.close()
        manager.close()

    def test_get_db_manager_uninitialized(self, monkeypatch):
        monkeypatch.setattr(db_config_module, "_db_manager", None)

        with pytest.raises(ServiceError) as exc_info:
            get_db_manager()

        assert exc_info.value.error_code == ErrorCode.CONFIGURATION_ERROR
