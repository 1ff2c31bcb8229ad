"""
Pydantic schemas for API credentials and their rate-limit state.
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import RateLimitHeader
from ..utils.datetime_utils import ensure_utc, format_rfc3339, next_reset, start_of_utc_day
from .principal_schema import PrincipalRead


class CredentialRead(BaseModel):
    """Schema for reading an API credential from the store."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    principal_external_id: int
    api_key: str = Field(..., repr=False)
    created_at: datetime
    updated_at: datetime
    last_used_at: Optional[datetime] = None
    request_count: int = 0
    daily_request_count: int = 0
    daily_reset_at: datetime
    daily_limit: int

    @field_validator("created_at", "updated_at", "last_used_at", "daily_reset_at")
    @classmethod
    def normalize_timestamps(cls, v):
        """Timestamps are always reported in UTC."""
        return ensure_utc(v)

    def rate_limit_status(self, now: Optional[datetime] = None) -> "RateLimitStatus":
        """
        Usage as of `now` without consuming a request.

        A stored window older than the current UTC day counts as unused.
        """
        today = start_of_utc_day(now)
        if self.daily_reset_at < today:
            return RateLimitStatus(limit=self.daily_limit, used=0, reset_at=next_reset(today))
        return RateLimitStatus(
            limit=self.daily_limit,
            used=self.daily_request_count,
            reset_at=next_reset(self.daily_reset_at),
        )


class RateLimitStatus(BaseModel):
    """Daily allowance of a credential at a point in time."""

    limit: int = Field(..., gt=0)
    used: int = Field(..., ge=0)
    reset_at: datetime

    @field_validator("reset_at")
    @classmethod
    def normalize_reset_at(cls, v):
        return ensure_utc(v)

    @property
    def remaining(self) -> int:
        return max(self.limit - self.used, 0)

    def rate_limit_headers(self) -> Dict[str, str]:
        """Project into X-RateLimit-* response headers."""
        return {
            RateLimitHeader.LIMIT.value: str(self.limit),
            RateLimitHeader.REMAINING.value: str(self.remaining),
            RateLimitHeader.RESET.value: format_rfc3339(self.reset_at),
        }


class ValidationResult(RateLimitStatus):
    """Outcome of an accepted request: who made it and what is left today."""

    principal: PrincipalRead
