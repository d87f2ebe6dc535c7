"""
Pydantic schemas mirroring the backend records.
"""
from carwash.schemas.user import User, UserSummary, Credentials, ProfileUpdate
from carwash.schemas.car import Car, CarCreate, CarSummary
from carwash.schemas.package import Package, PackageCreate, PackageSummary
from carwash.schemas.service import Service, ServiceCreate, ServiceSummary
from carwash.schemas.payment import Payment, PaymentCreate, PaymentMethod, PaymentStatus
from carwash.schemas.activity import Activity
from carwash.schemas.session import Session, device_kind
from carwash.schemas.admin import UserDetails

__all__ = [
    "User", "UserSummary", "Credentials", "ProfileUpdate",
    "Car", "CarCreate", "CarSummary",
    "Package", "PackageCreate", "PackageSummary",
    "Service", "ServiceCreate", "ServiceSummary",
    "Payment", "PaymentCreate", "PaymentMethod", "PaymentStatus",
    "Activity",
    "Session", "device_kind",
    "UserDetails",
]
