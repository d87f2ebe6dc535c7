"""
Pydantic schemas for User and authentication.
"""
from datetime import datetime
from typing import Literal, Optional

from carwash.schemas.base import BackendModel, record_id


class User(BackendModel):
    """Schema for the signed-in user as returned by /auth/me."""
    id: str = record_id()
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    profile_image: Optional[str] = None
    role: Literal["user", "admin"] = "user"
    provider: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def initial(self) -> str:
        return self.username[:1].upper()


class UserSummary(BackendModel):
    """Owner reference embedded in other records."""
    id: Optional[str] = record_id(default=None)
    username: Optional[str] = None


class Credentials(BackendModel):
    """Schema for login and register requests."""
    username: str
    password: str


class ProfileUpdate(BackendModel):
    """Schema for profile edits."""
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
