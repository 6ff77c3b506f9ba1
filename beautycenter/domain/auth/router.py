"""Authentication router - login, registration and token checks"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ..events import EventBus, get_event_bus
from ..users.router import to_response as user_response
from ..users.schemas import UserResponse
from .schemas import AuthResponse, LoginRequest, RegisterRequest
from .service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_auth_service(
    db: Session = Depends(get_db),
    event_bus: EventBus = Depends(get_event_bus),
) -> AuthService:
    """Dependency injection for AuthService"""
    return AuthService(db, event_bus)


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """Exchange username and password for a bearer token"""
    return service.login(data)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(data: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    return service.register(data)


@router.get("/check-username/{username}", response_model=bool)
async def check_username(username: str, service: AuthService = Depends(get_auth_service)):
    """True when the username is still available"""
    return service.is_username_available(username)


@router.get("/check-email/{email}", response_model=bool)
async def check_email(email: str, service: AuthService = Depends(get_auth_service)):
    return service.is_email_available(email)


@router.get("/validate-token", response_model=bool)
async def validate_token(token: str = Query(...), service: AuthService = Depends(get_auth_service)):
    return service.validate_token(token)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information"""
    return user_response(current_user)
