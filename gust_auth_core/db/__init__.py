"""
SQLAlchemy models and database plumbing for the auth core.

This module provides a common entry point for all models.
"""

# Import base definitions
from .db_base import (
    EncryptedBinary,
    TimestampMixin,
    UUIDMixin,
)

# Import configuration
from .db_config import (
    Base,
    DatabaseConfig,
    DatabaseManager,
    close_db,
    get_db_manager,
    get_development_config,
    get_production_config,
    import_all_models,
    initialize_db,
    set_db_manager,
)

# Import models
from .db_credential_models import APICredential
from .db_principal_models import Principal

__all__ = [
    # Base definitions
    "Base",
    "EncryptedBinary",
    "TimestampMixin",
    "UUIDMixin",
    # Configuration
    "DatabaseConfig",
    "DatabaseManager",
    "close_db",
    "get_db_manager",
    "get_development_config",
    "get_production_config",
    "import_all_models",
    "initialize_db",
    "set_db_manager",
    # Models
    "APICredential",
    "Principal",
]
