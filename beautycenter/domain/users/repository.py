"""User repository - Database operations for user accounts"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Role, User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_users(db: Session, company_id: Optional[str] = None) -> list[User]:
        query = db.query(User)
        if company_id:
            query = query.filter(User.company_id == company_id)
        return query.order_by(User.username).all()

    @staticmethod
    def get_users_by_role(db: Session, role: Role, company_id: Optional[str] = None) -> list[User]:
        # Roles are a JSON list; filter in Python to stay portable across dialects
        return [u for u in UserRepository.get_users(db, company_id) if u.has_role(role)]

    @staticmethod
    def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> Optional[User]:
        return db.query(User).filter(func.lower(User.username) == username.lower()).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(func.lower(User.email) == email.lower()).first()

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        """Update a user with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(user, key):
                setattr(user, key, value)

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, user: User) -> None:
        db.delete(user)
        db.commit()
