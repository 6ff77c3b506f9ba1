"""Employee domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_phone


class EmployeeCreate(BaseModel):
    """Schema for creating a new employee"""

    companyId: str
    firstName: str
    lastName: str
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    role: Optional[str] = None

    @field_validator("phoneNumber")
    @classmethod
    def validate_phone(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)


class EmployeeUpdate(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    role: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("phoneNumber")
    @classmethod
    def validate_phone(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)


class EmployeeResponse(BaseModel):
    """Schema for employee response"""

    id: str
    companyId: str
    firstName: str
    lastName: str
    fullName: str
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    role: Optional[str] = None
    active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
