import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models import Role, User
from .security_utils import decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

STAFF_ROLES = (Role.ADMIN, Role.EMPLOYEE, Role.RECEPTIONIST, Role.STANDARDIST)
MANAGER_ROLES = (Role.ADMIN, Role.RECEPTIONIST)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from a bearer access token"""

    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = credentials.credentials

    # Basic token format validation before processing
    if len(token.split(".")) != 3:
        logger.warning(f"Malformed token received, length: {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.query(User).filter(User.id == payload["sub"]).first()
    if not user:
        logger.warning(f"Token references unknown user: {payload['sub']}")
        raise HTTPException(status_code=401, detail="User no longer exists")

    if not user.active:
        logger.warning(f"Inactive user attempted access: {user.username}")
        raise HTTPException(status_code=403, detail="User account is deactivated")

    logger.debug(f"User authenticated: {user.username}")
    return user


def require_roles(*roles: Role):
    """
    Dependency factory restricting a route to users holding any of the roles.

    Usage: current_user: User = Depends(require_roles(Role.ADMIN))
    """

    async def checker(user: User = Depends(get_current_user)) -> User:
        if not any(user.has_role(role) for role in roles):
            logger.warning(
                f"User {user.username} denied: requires one of {[r.value for r in roles]}"
            )
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return user

    return checker


def ensure_company_access(user: User, company_id: Optional[str]) -> None:
    """Admins reach every company; everyone else only their own"""
    if user.is_admin:
        return
    if not company_id or user.company_id != company_id:
        logger.warning(f"User {user.username} denied access to company {company_id}")
        raise HTTPException(status_code=403, detail="Access to this company is not allowed")


def company_scope_for(user: User) -> Optional[str]:
    """
    Company a user's queries are confined to.

    Returns None for admins (no restriction).
    """
    if user.is_admin:
        return None
    if not user.company_id:
        raise HTTPException(status_code=403, detail="User is not associated with any company")
    return user.company_id
