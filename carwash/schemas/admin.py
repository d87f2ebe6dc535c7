"""
Pydantic schemas for the admin user views.
"""
from typing import List

from carwash.schemas.base import BackendModel
from carwash.schemas.car import Car
from carwash.schemas.package import Package
from carwash.schemas.payment import Payment
from carwash.schemas.service import Service
from carwash.schemas.session import Session
from carwash.schemas.user import User


class UserDetails(BackendModel):
    """Everything the backend knows about one user."""
    user: User
    cars: List[Car] = []
    packages: List[Package] = []
    services: List[Service] = []
    payments: List[Payment] = []
    sessions: List[Session] = []

    def counts(self) -> dict:
        return {
            "cars": len(self.cars),
            "packages": len(self.packages),
            "services": len(self.services),
            "payments": len(self.payments),
            "sessions": len(self.sessions),
        }
