"""
Pydantic schemas for Activity feed entries.
"""
from datetime import datetime, timezone
from typing import Optional

from pydantic import field_validator

from carwash.schemas.base import BackendModel, record_id


class Activity(BackendModel):
    """Schema for activity responses."""
    id: str = record_id()
    title: str
    description: Optional[str] = None
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # Timestamps without an offset are UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
