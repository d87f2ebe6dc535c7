"""
Pydantic schemas for Payment.
"""
import enum
from datetime import date, datetime
from typing import Optional

from pydantic import field_validator

from carwash.schemas.base import BackendModel, parse_day, record_id
from carwash.schemas.service import ServiceSummary


class PaymentMethod(str, enum.Enum):
    """Payment method enumeration."""
    CASH = "cash"
    MOBILE_MONEY = "mobile_money"
    BANK_TRANSFER = "bank_transfer"
    CARD = "card"


class PaymentStatus(str, enum.Enum):
    """Payment status enumeration."""
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class PaymentCreate(BackendModel):
    """Schema for recording a payment."""
    payment_number: str
    amount_paid: float
    payment_date: str
    payment_method: PaymentMethod
    status: PaymentStatus = PaymentStatus.COMPLETED
    service_package: str


class Payment(BackendModel):
    """Schema for payment responses."""
    id: str = record_id()
    payment_number: str
    amount_paid: float
    payment_date: str
    payment_method: Optional[str] = None
    status: Optional[str] = None
    service_package: Optional[ServiceSummary] = None
    created_at: Optional[datetime] = None

    @field_validator("service_package", mode="before")
    @classmethod
    def _service_reference(cls, value):
        if isinstance(value, str):
            return {"_id": value}
        return value

    @property
    def day(self) -> Optional[date]:
        return parse_day(self.payment_date)
