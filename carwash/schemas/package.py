"""
Pydantic schemas for Package.
"""
from datetime import datetime
from typing import Optional

from carwash.schemas.base import BackendModel, record_id


class PackageBase(BackendModel):
    """Base package schema with common fields."""
    package_number: Optional[str] = None
    package_name: str
    package_description: Optional[str] = None
    package_price: float


class PackageCreate(PackageBase):
    """Schema for creating or updating a package."""
    pass


class Package(PackageBase):
    """Schema for package responses."""
    id: str = record_id()
    created_at: Optional[datetime] = None


class PackageSummary(BackendModel):
    """Package reference embedded in service records."""
    id: Optional[str] = record_id(default=None)
    package_name: Optional[str] = None
    package_price: Optional[float] = None
