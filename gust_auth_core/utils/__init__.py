"""Utility modules for the Gust auth core."""

# Generic CRUD helpers
from .crud_helpers import (
    create_record,
    get_record,
    record_exists,
    update_record,
)

# UTC day-window helpers
from .datetime_utils import (
    ensure_utc,
    format_rfc3339,
    next_reset,
    start_of_utc_day,
    utc_now,
)

# Encryption utilities
from .encryption_utils import (
    decrypt_access_token,
    decrypt_value,
    encrypt_access_token,
    encrypt_value,
)

# Logging utilities
from .logger import (
    ContextAwareLogger,
    CorrelationIdFilter,
    configure_logging,
    get_logger,
    mask_secret,
    reset_logging,
)

__all__ = [
    "create_record",
    "get_record",
    "record_exists",
    "update_record",
    "ensure_utc",
    "format_rfc3339",
    "next_reset",
    "start_of_utc_day",
    "utc_now",
    "decrypt_access_token",
    "decrypt_value",
    "encrypt_access_token",
    "encrypt_value",
    "ContextAwareLogger",
    "CorrelationIdFilter",
    "configure_logging",
    "get_logger",
    "mask_secret",
    "reset_logging",
]
