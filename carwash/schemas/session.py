"""
Pydantic schemas for the user's backend sessions.
"""
from datetime import datetime
from typing import Optional

from carwash.schemas.base import BackendModel, record_id


class Session(BackendModel):
    """Schema for an active backend session."""
    id: str = record_id()
    session_id: Optional[str] = None
    ip: Optional[str] = None
    location: Optional[str] = None
    user_agent: Optional[str] = None
    device: Optional[str] = None
    platform: Optional[str] = None
    browser: Optional[str] = None
    created_at: Optional[datetime] = None
    last_active: Optional[datetime] = None

    @property
    def device_kind(self) -> str:
        return device_kind(self.device)


def device_kind(device: Optional[str]) -> str:
    """Classify a device string as mobile, tablet or desktop."""
    name = (device or "").lower()
    if "mobile" in name or "phone" in name:
        return "mobile"
    if "tablet" in name:
        return "tablet"
    return "desktop"
