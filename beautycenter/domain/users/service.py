"""User service - Account management with domain events"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Company, Role, User
from ...security_utils import hash_password, log_security_event, password_problems, verify_password
from ...shared.exceptions import AlreadyExistsError, NotFoundError, ValidationError
from ..events import EventBus, UserCreated, UserDeleted, UserUpdated
from .repository import UserRepository
from .schemas import PasswordChangeRequest, UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user accounts"""

    def __init__(self, db: Session, event_bus: EventBus):
        self.db = db
        self.repo = UserRepository()
        self.event_bus = event_bus

    # ========================================================================
    # QUERIES
    # ========================================================================

    def get_users(self, company_id: Optional[str] = None) -> list[User]:
        return self.repo.get_users(self.db, company_id)

    def get_users_by_role(self, role: Role, company_id: Optional[str] = None) -> list[User]:
        return self.repo.get_users_by_role(self.db, role, company_id)

    def get_user(self, user_id: str) -> User:
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def is_username_available(self, username: str) -> bool:
        return self.repo.get_user_by_username(self.db, username) is None

    def is_email_available(self, email: str) -> bool:
        return self.repo.get_user_by_email(self.db, email) is None

    # ========================================================================
    # WRITES
    # ========================================================================

    def _ensure_unique(self, username: Optional[str], email: Optional[str], user_id: Optional[str] = None):
        if username:
            existing = self.repo.get_user_by_username(self.db, username)
            if existing and existing.id != user_id:
                raise AlreadyExistsError(f"Username already exists: {username}")
        if email:
            existing = self.repo.get_user_by_email(self.db, email)
            if existing and existing.id != user_id:
                raise AlreadyExistsError(f"Email already exists: {email}")

    def _ensure_company(self, company_id: Optional[str]) -> None:
        if company_id and not self.db.query(Company).filter(Company.id == company_id).first():
            raise NotFoundError("Company", company_id)

    @staticmethod
    def _ensure_strong(password: str) -> None:
        problems = password_problems(password)
        if problems:
            raise ValidationError(f"Password {'; '.join(problems)}")

    def create_user(self, data: UserCreate) -> User:
        """Create a user account; usernames and emails are unique"""
        self._ensure_unique(data.username, data.email)
        self._ensure_strong(data.password)
        self._ensure_company(data.companyId)

        roles = [r.value for r in dict.fromkeys(data.roles)] or [Role.USER.value]
        user = self.repo.create_user(
            self.db,
            username=data.username,
            password_hash=hash_password(data.password),
            email=data.email,
            first_name=data.firstName,
            last_name=data.lastName,
            phone_number=data.phoneNumber,
            roles=roles,
            company_id=data.companyId,
            active=data.active,
        )
        logger.info(f"✅ User created: {user.username} ({user.id}) roles={roles}")
        self.event_bus.publish(UserCreated(user_id=user.id, username=user.username))
        return user

    def update_user(self, user_id: str, data: UserUpdate) -> User:
        user = self.get_user(user_id)
        self._ensure_unique(data.username, data.email, user.id)
        self._ensure_company(data.companyId)

        updates = {}
        if data.username is not None:
            updates["username"] = data.username
        if data.email is not None:
            updates["email"] = data.email
        if data.firstName is not None:
            updates["first_name"] = data.firstName
        if data.lastName is not None:
            updates["last_name"] = data.lastName
        if data.phoneNumber is not None:
            updates["phone_number"] = data.phoneNumber
        if data.roles is not None:
            updates["roles"] = [r.value for r in dict.fromkeys(data.roles)]
        if data.companyId is not None:
            updates["company_id"] = data.companyId

        user = self.repo.update_user(self.db, user, **updates)
        logger.info(f"User updated: {user.username}")
        self.event_bus.publish(UserUpdated(user_id=user.id, username=user.username, change="profile"))
        return user

    def change_status(self, user_id: str, active: bool) -> User:
        user = self.get_user(user_id)
        user = self.repo.update_user(self.db, user, active=active)

        change = "activated" if active else "deactivated"
        logger.info(f"User {user.username} {change}")
        self.event_bus.publish(UserUpdated(user_id=user.id, username=user.username, change=change))
        return user

    def change_password(self, user_id: str, data: PasswordChangeRequest, require_current: bool = True) -> User:
        """
        Replace a user's password.

        The current password must match unless require_current is False
        (administrator reset).
        """
        user = self.get_user(user_id)

        if require_current and not (
            data.currentPassword and verify_password(data.currentPassword, user.password_hash)
        ):
            log_security_event("password_change_failed", user.id)
            raise ValidationError("Current password is incorrect")

        self._ensure_strong(data.newPassword)
        user = self.repo.update_user(self.db, user, password_hash=hash_password(data.newPassword))

        log_security_event("password_changed", user.id)
        self.event_bus.publish(UserUpdated(user_id=user.id, username=user.username, change="password"))
        return user

    def delete_user(self, user_id: str) -> None:
        user = self.get_user(user_id)
        username = user.username
        self.repo.delete_user(self.db, user)

        logger.info(f"🗑️ User deleted: {username} ({user_id})")
        self.event_bus.publish(UserDeleted(user_id=user_id, username=username))

    def ensure_admin(self, username: str, password: str, email: str) -> User:
        """Create the bootstrap administrator unless the username already exists"""
        existing = self.repo.get_user_by_username(self.db, username)
        if existing:
            if not existing.is_admin:
                logger.warning(f"Bootstrap admin '{username}' exists without the ADMIN role")
            return existing

        return self.create_user(
            UserCreate(username=username, password=password, email=email, roles=[Role.ADMIN])
        )
