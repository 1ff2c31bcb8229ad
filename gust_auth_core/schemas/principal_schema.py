"""
Pydantic schemas for principals.

PrincipalIdentity is what the provider tells us about a user; PrincipalRead is
what the store hands back. The provider access token only ever travels inside
PrincipalIdentity and is excluded from its repr.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.datetime_utils import ensure_utc


class PrincipalIdentity(BaseModel):
    """Identity resolved from the OAuth provider."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    external_id: int = Field(..., description="Provider's numeric user id")
    login: str = Field(..., min_length=1, description="Provider login handle")
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Public email, if any")
    avatar_url: Optional[str] = Field(None, description="Avatar image URL")
    access_token: str = Field(..., min_length=1, repr=False, description="Provider access token")


class PrincipalRead(BaseModel):
    """Schema for reading a principal from the store."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    external_id: int
    login: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    starred_repo: bool = False
    created_at: datetime
    updated_at: datetime
    last_login_at: datetime

    @field_validator("created_at", "updated_at", "last_login_at")
    @classmethod
    def normalize_timestamps(cls, v):
        """Timestamps are always reported in UTC."""
        return ensure_utc(v)
