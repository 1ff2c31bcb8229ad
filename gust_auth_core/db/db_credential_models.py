"""
API credential model.

Just the data structure - no business logic or class methods.
Counters are mutated only by the rate-limited validator.
"""

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, String

from .db_base import TimestampMixin, UUIDMixin
from .db_config import Base


class APICredential(Base, UUIDMixin, TimestampMixin):
    """One issued API key per principal, with its usage counters."""

    __tablename__ = "api_credentials"

    principal_external_id = Column(
        BigInteger, ForeignKey("principals.external_id"), nullable=False, unique=True
    )
    api_key = Column(String(64), nullable=False, unique=True, index=True)

    # Usage
    last_used_at = Column(DateTime(timezone=True), nullable=True)
    request_count = Column(Integer, nullable=False, default=0)

    # Daily window: the count only covers requests at or after daily_reset_at
    daily_request_count = Column(Integer, nullable=False, default=0)
    daily_reset_at = Column(DateTime(timezone=True), nullable=False)
    daily_limit = Column(Integer, nullable=False)
