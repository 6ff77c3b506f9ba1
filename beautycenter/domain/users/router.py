"""User router - FastAPI endpoints for user account management"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from ...auth import company_scope_for, ensure_company_access, get_current_user, require_roles
from ...database import get_db
from ...models import Role, User
from ...shared.exceptions import NotFoundError
from ..events import EventBus, get_event_bus
from .schemas import PasswordChangeRequest, UserCreate, UserResponse, UserUpdate
from .service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

LISTING_ROLES = (Role.ADMIN, Role.EMPLOYEE, Role.RECEPTIONIST)


def get_user_service(
    db: Session = Depends(get_db),
    event_bus: EventBus = Depends(get_event_bus),
) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db, event_bus)


def to_response(u: User) -> UserResponse:
    return UserResponse(
        id=u.id,
        username=u.username,
        email=u.email,
        firstName=u.first_name,
        lastName=u.last_name,
        fullName=u.full_name,
        phoneNumber=u.phone_number,
        roles=u.roles or [],
        active=u.active,
        companyId=u.company_id,
        created_at=u.created_at,
    )


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    current_user: User = Depends(require_roles(Role.ADMIN)),
    service: UserService = Depends(get_user_service),
):
    """Create a user with any roles (registration always yields USER)"""
    return to_response(service.create_user(data))


@router.get("", response_model=list[UserResponse])
async def get_users(
    current_user: User = Depends(require_roles(*LISTING_ROLES)),
    service: UserService = Depends(get_user_service),
):
    return [to_response(u) for u in service.get_users(company_scope_for(current_user))]


@router.get("/company/{company_id}", response_model=list[UserResponse])
async def get_users_by_company(
    company_id: str,
    current_user: User = Depends(require_roles(*LISTING_ROLES)),
    service: UserService = Depends(get_user_service),
):
    ensure_company_access(current_user, company_id)
    return [to_response(u) for u in service.get_users(company_id)]


@router.get("/role/{role}", response_model=list[UserResponse])
async def get_users_by_role(
    role: Role,
    current_user: User = Depends(require_roles(*LISTING_ROLES)),
    service: UserService = Depends(get_user_service),
):
    return [to_response(u) for u in service.get_users_by_role(role, company_scope_for(current_user))]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Users can read themselves; admins anyone; others their company colleagues"""
    if user_id == current_user.id:
        return to_response(current_user)

    user = service.get_user(user_id)
    if not current_user.is_admin and (
        not current_user.company_id or user.company_id != current_user.company_id
    ):
        raise NotFoundError("User", user_id)
    return to_response(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: UserUpdate,
    current_user: User = Depends(require_roles(Role.ADMIN)),
    service: UserService = Depends(get_user_service),
):
    return to_response(service.update_user(user_id, data))


@router.patch("/{user_id}/status", response_model=UserResponse)
async def change_user_status(
    user_id: str,
    active: bool = Query(...),
    current_user: User = Depends(require_roles(Role.ADMIN)),
    service: UserService = Depends(get_user_service),
):
    return to_response(service.change_status(user_id, active))


@router.patch("/{user_id}/password", response_model=UserResponse)
async def change_password(
    user_id: str,
    data: PasswordChangeRequest,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Change a password: admins for anyone, other users only their own"""
    is_self = user_id == current_user.id
    if not is_self and not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Insufficient permissions")

    user = service.change_password(user_id, data, require_current=is_self)
    return to_response(user)


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    current_user: User = Depends(require_roles(Role.ADMIN)),
    service: UserService = Depends(get_user_service),
):
    service.delete_user(user_id)
    return Response(status_code=204)
