"""Appointment domain schemas - Pydantic models for validation"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import AppointmentStatus


def _non_negative(v):
    if v is not None and v < 0:
        raise ValueError("Total price cannot be negative")
    return v


class AppointmentCreate(BaseModel):
    """Schema for booking an appointment"""

    companyId: str
    employeeId: str
    customerId: str
    serviceId: str
    startTime: datetime
    endTime: Optional[datetime] = None  # defaults to start + service duration
    status: Optional[AppointmentStatus] = None  # REQUESTED unless CONFIRMED is asked for
    notes: Optional[str] = None
    totalPrice: Optional[Decimal] = None  # defaults to the sum of the service prices
    additionalServiceIds: list[str] = []

    @field_validator("totalPrice")
    @classmethod
    def validate_total_price(cls, v):
        return _non_negative(v)


class AppointmentUpdate(BaseModel):
    """Partial update; status only changes through the transition endpoints"""

    employeeId: Optional[str] = None
    customerId: Optional[str] = None
    serviceId: Optional[str] = None
    startTime: Optional[datetime] = None
    endTime: Optional[datetime] = None
    notes: Optional[str] = None
    totalPrice: Optional[Decimal] = None

    @field_validator("totalPrice")
    @classmethod
    def validate_total_price(cls, v):
        return _non_negative(v)


class AppointmentResponse(BaseModel):
    """Schema for appointment response"""

    id: str
    companyId: str
    employeeId: str
    employeeName: Optional[str] = None
    customerId: str
    customerName: Optional[str] = None
    serviceId: str
    serviceName: Optional[str] = None
    additionalServiceIds: list[str] = []
    startTime: datetime
    endTime: datetime
    durationMinutes: Optional[int] = None
    status: AppointmentStatus
    notes: Optional[str] = None
    totalPrice: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AvailabilityResponse(BaseModel):
    companyId: str
    employeeId: str
    startTime: datetime
    endTime: datetime
    available: bool
