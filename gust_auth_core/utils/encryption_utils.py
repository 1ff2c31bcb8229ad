"""
Encryption of provider access tokens at rest.

Handles cross-database encryption (PostgreSQL pgcrypto, SQLite plaintext for testing).
"""

from typing import Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from ..config import get_config


def _encryption_key(key_suffix: str = "") -> str:
    base_key = get_config().security.token_encryption_key
    return f"{base_key}_{key_suffix}" if key_suffix else base_key


def encrypt_value(session: Session, value: str, key_suffix: str = ""):
    """
    Encrypt a value using database-specific encryption.

    Args:
        session: Database session
        value: Value to encrypt
        key_suffix: Additional key suffix for different data types

    Returns:
        Encrypted bytes on PostgreSQL, the plain value elsewhere
    """
    if session.bind.dialect.name == "postgresql":
        return session.execute(
            text("SELECT pgp_sym_encrypt(:data, :key)"),
            {"data": value, "key": _encryption_key(key_suffix)},
        ).scalar()

    # SQLite for testing - stored as-is
    return value


def decrypt_value(session: Session, encrypted_value, key_suffix: str = "") -> Optional[str]:
    """
    Decrypt a value using database-specific decryption.

    Args:
        session: Database session
        encrypted_value: Value as read from the column
        key_suffix: Additional key suffix for different data types

    Returns:
        Decrypted string or None
    """
    if not encrypted_value:
        return None

    if session.bind.dialect.name == "postgresql":
        return session.execute(
            text("SELECT pgp_sym_decrypt(:data, :key)"),
            {"data": encrypted_value, "key": _encryption_key(key_suffix)},
        ).scalar()

    if isinstance(encrypted_value, bytes):
        return encrypted_value.decode()
    return encrypted_value


def encrypt_access_token(session: Session, token: str, provider: str = "github"):
    """Encrypt a provider access token with provider isolation."""
    return encrypt_value(session, token, f"token_{provider}")


def decrypt_access_token(session: Session, encrypted, provider: str = "github") -> Optional[str]:
    """Decrypt a provider access token."""
    return decrypt_value(session, encrypted, f"token_{provider}")
