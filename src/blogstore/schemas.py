"""Pydantic models validating input to the store operations."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, field_validator


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert a supplied creation time to UTC; naive values are taken as UTC.

    Times in the future are rejected so ``updated_at`` never precedes
    ``created_at``.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    if value > datetime.now(timezone.utc):
        raise ValueError("created_at must not be in the future")
    return value


class UserCreate(BaseModel):
    """Fields required to insert a user."""

    username: StrictStr
    email: StrictStr
    password_hash: StrictStr
    created_at: Optional[datetime] = None

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class PostCreate(BaseModel):
    """Fields accepted when inserting a post."""

    author_id: StrictInt
    title: Optional[StrictStr] = None
    content: Optional[StrictStr] = None
    created_at: Optional[datetime] = None

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class PostUpdate(BaseModel):
    """Mutable post fields. Unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[StrictStr] = None
    content: Optional[StrictStr] = None
