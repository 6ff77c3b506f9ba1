"""Service catalogue schemas - Pydantic models for validation"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator


def _positive_duration(v):
    if v is not None and v <= 0:
        raise ValueError("Duration must be greater than 0 minutes")
    return v


def _non_negative_price(v):
    if v is not None and v < 0:
        raise ValueError("Price cannot be negative")
    return v


class ServiceCreate(BaseModel):
    """Schema for creating a new bookable service"""

    companyId: str
    name: str
    description: Optional[str] = None
    durationMinutes: int
    price: Decimal
    category: Optional[str] = None

    @field_validator("durationMinutes")
    @classmethod
    def validate_duration(cls, v):
        return _positive_duration(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _non_negative_price(v)


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    durationMinutes: Optional[int] = None
    price: Optional[Decimal] = None
    category: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("durationMinutes")
    @classmethod
    def validate_duration(cls, v):
        return _positive_duration(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _non_negative_price(v)


class ServiceResponse(BaseModel):
    """Schema for service response"""

    id: str
    companyId: str
    name: str
    description: Optional[str] = None
    durationMinutes: int
    price: float
    category: Optional[str] = None
    active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
