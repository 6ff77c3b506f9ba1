"""Authentication schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import Role
from ...shared.validators import validate_email, validate_phone, validate_username


class LoginRequest(BaseModel):
    username: str
    password: str


class RegisterRequest(BaseModel):
    """Self-service sign-up; the account always gets the USER role"""

    username: str
    password: str
    email: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phoneNumber: Optional[str] = None

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


class AuthResponse(BaseModel):
    accessToken: str
    tokenType: str = "Bearer"
    expiresAt: datetime
    userId: str
    username: str
    email: str
    roles: list[Role] = []
    companyId: Optional[str] = None
