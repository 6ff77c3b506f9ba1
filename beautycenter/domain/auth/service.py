"""Authentication service - Credential checks and token issuance"""

import logging

from sqlalchemy.orm import Session

from ...models import Role, User
from ...security_utils import create_access_token, decode_access_token, log_security_event, verify_password
from ...shared.exceptions import AuthenticationError
from ..events import EventBus
from ..users.repository import UserRepository
from ..users.schemas import UserCreate
from ..users.service import UserService
from .schemas import AuthResponse, LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session, event_bus: EventBus):
        self.db = db
        self.repo = UserRepository()
        self.users = UserService(db, event_bus)

    def issue_token(self, user: User) -> AuthResponse:
        token, expires_at = create_access_token(
            user.id,
            {"username": user.username, "roles": list(user.roles or []), "companyId": user.company_id},
        )
        return AuthResponse(
            accessToken=token,
            expiresAt=expires_at,
            userId=user.id,
            username=user.username,
            email=user.email,
            roles=user.roles or [],
            companyId=user.company_id,
        )

    def login(self, data: LoginRequest) -> AuthResponse:
        """Authenticate by username and password"""
        user = self.repo.get_user_by_username(self.db, data.username.strip())

        if not user or not verify_password(data.password, user.password_hash):
            logger.warning(f"Failed login for username: {data.username}")
            log_security_event("failed_auth", user.id if user else None, {"username": data.username})
            raise AuthenticationError("Invalid username or password")

        if not user.active:
            log_security_event("failed_auth", user.id, {"reason": "inactive"})
            raise AuthenticationError("User account is deactivated")

        log_security_event("login", user.id)
        return self.issue_token(user)

    def register(self, data: RegisterRequest) -> AuthResponse:
        user = self.users.create_user(
            UserCreate(
                username=data.username,
                password=data.password,
                email=data.email,
                firstName=data.firstName,
                lastName=data.lastName,
                phoneNumber=data.phoneNumber,
                roles=[Role.USER],
            )
        )
        log_security_event("register", user.id)
        return self.issue_token(user)

    def is_username_available(self, username: str) -> bool:
        return self.users.is_username_available(username)

    def is_email_available(self, email: str) -> bool:
        return self.users.is_email_available(email)

    def validate_token(self, token: str) -> bool:
        """True when the token verifies and names an active user"""
        payload = decode_access_token(token)
        if not payload or not payload.get("sub"):
            return False
        user = self.repo.get_user_by_id(self.db, payload["sub"])
        return bool(user and user.active)
