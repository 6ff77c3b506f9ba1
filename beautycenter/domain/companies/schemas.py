"""Company domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_phone


class CompanyBase(BaseModel):
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None
    country: Optional[str] = None
    phoneNumber: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    logoUrl: Optional[str] = None

    @field_validator("phoneNumber")
    @classmethod
    def validate_phone(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)


class CompanyCreate(CompanyBase):
    """Schema for creating a new company"""

    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Company name is required")
        return v


class CompanyUpdate(CompanyBase):
    """Schema for updating an existing company"""

    name: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Company name cannot be blank")
        return v.strip() if v else v


class CompanyResponse(BaseModel):
    """Schema for company response"""

    id: str
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None
    country: Optional[str] = None
    phoneNumber: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    logoUrl: Optional[str] = None
    active: bool
    fullAddress: str = ""
    hasValidAddress: bool = False
    hasValidContactInfo: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
