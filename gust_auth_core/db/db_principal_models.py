"""
Principal model: a person authenticated through the OAuth provider.

Just the data structure; all operations live in the credential store.
"""

from sqlalchemy import BigInteger, Boolean, Column, DateTime, String

from ..utils.datetime_utils import utc_now
from .db_base import EncryptedBinary, TimestampMixin, UUIDMixin
from .db_config import Base


class Principal(Base, UUIDMixin, TimestampMixin):
    """Principal keyed by the provider's immutable numeric user id."""

    __tablename__ = "principals"

    # Provider identity
    external_id = Column(BigInteger, nullable=False, unique=True, index=True)
    login = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    avatar_url = Column(String(500), nullable=True)

    # Provider token, encrypted at rest on PostgreSQL
    access_token = Column(EncryptedBinary, nullable=False)

    starred_repo = Column(Boolean, nullable=False, default=False)
    last_login_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
