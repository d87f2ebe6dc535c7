"""
Pydantic schemas for Service records.
"""
from datetime import date, datetime
from typing import Optional

from pydantic import field_validator

from carwash.schemas.base import BackendModel, parse_day, record_id
from carwash.schemas.car import CarSummary
from carwash.schemas.package import PackageSummary
from carwash.schemas.user import UserSummary


class ServiceCreate(BackendModel):
    """Schema for creating or updating a service record."""
    record_number: str
    service_date: str
    car: str
    package: str


class ServiceSummary(BackendModel):
    """Service reference embedded in payments."""
    id: Optional[str] = record_id(default=None)
    record_number: Optional[str] = None
    car: Optional[CarSummary] = None
    package: Optional[PackageSummary] = None

    @field_validator("car", "package", mode="before")
    @classmethod
    def _unpopulated_reference(cls, value):
        # Unpopulated references arrive as bare ids
        if isinstance(value, str):
            return {"_id": value}
        return value


class Service(ServiceSummary):
    """Schema for service record responses."""
    id: str = record_id()
    record_number: str
    service_date: str
    user: Optional[UserSummary] = None
    created_at: Optional[datetime] = None

    @field_validator("user", mode="before")
    @classmethod
    def _unpopulated_user(cls, value):
        if isinstance(value, str):
            return {"_id": value}
        return value

    @property
    def day(self) -> Optional[date]:
        return parse_day(self.service_date)
