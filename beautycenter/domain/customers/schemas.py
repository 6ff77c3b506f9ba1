"""Customer domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_phone


class CustomerCreate(BaseModel):
    """Schema for creating a new customer"""

    firstName: str
    lastName: str
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    address: Optional[str] = None

    @field_validator("phoneNumber")
    @classmethod
    def validate_phone(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)


class CustomerUpdate(BaseModel):
    """Schema for updating an existing customer"""

    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    address: Optional[str] = None

    @field_validator("phoneNumber")
    @classmethod
    def validate_phone(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)


class CustomerResponse(BaseModel):
    id: str
    firstName: str
    lastName: str
    fullName: str
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
