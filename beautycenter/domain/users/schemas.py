"""User domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import Role
from ...shared.validators import validate_email, validate_phone, validate_username


class UserCreate(BaseModel):
    """Schema for an administrator creating a user account"""

    username: str
    password: str
    email: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phoneNumber: Optional[str] = None
    roles: list[Role] = [Role.USER]
    companyId: Optional[str] = None
    active: bool = True

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        return validate_username(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)

    @field_validator("phoneNumber")
    @classmethod
    def validate_phone(cls, v):
        return validate_phone(v)


class UserUpdate(BaseModel):
    """Schema for updating an existing user (password and status have their own endpoints)"""

    username: Optional[str] = None
    email: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phoneNumber: Optional[str] = None
    roles: Optional[list[Role]] = None
    companyId: Optional[str] = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        return validate_username(v) if v is not None else v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return validate_email(v)

    @field_validator("phoneNumber")
    @classmethod
    def validate_phone(cls, v):
        return validate_phone(v)


class PasswordChangeRequest(BaseModel):
    currentPassword: Optional[str] = None  # required unless an admin resets someone else's
    newPassword: str


class UserResponse(BaseModel):
    """Schema for user response"""

    id: str
    username: str
    email: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    fullName: str = ""
    phoneNumber: Optional[str] = None
    roles: list[Role] = []
    active: bool
    companyId: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
