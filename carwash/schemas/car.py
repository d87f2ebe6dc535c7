"""
Pydantic schemas for Car.
"""
from datetime import datetime
from typing import Optional

from carwash.schemas.base import BackendModel, record_id


class CarBase(BackendModel):
    """Base car schema with common fields."""
    plate_number: str
    car_type: Optional[str] = None
    car_size: Optional[str] = None
    driver_name: Optional[str] = None
    phone_number: Optional[str] = None


class CarCreate(CarBase):
    """Schema for creating or updating a car."""
    pass


class Car(CarBase):
    """Schema for car responses."""
    id: str = record_id()
    image: Optional[str] = None
    created_at: Optional[datetime] = None


class CarSummary(BackendModel):
    """Car reference embedded in service records."""
    id: Optional[str] = record_id(default=None)
    plate_number: Optional[str] = None
    car_type: Optional[str] = None
    driver_name: Optional[str] = None
