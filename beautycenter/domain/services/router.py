"""Service catalogue router - FastAPI endpoints for bookable services"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import MANAGER_ROLES, company_scope_for, ensure_company_access, get_current_user, require_roles
from ...database import get_db
from ...models import Service, User
from .schemas import ServiceCreate, ServiceResponse, ServiceUpdate
from .service import BeautyServiceService

router = APIRouter(prefix="/services", tags=["Services"])


def get_beauty_service_service(db: Session = Depends(get_db)) -> BeautyServiceService:
    """Dependency injection for BeautyServiceService"""
    return BeautyServiceService(db)


def to_response(s: Service) -> ServiceResponse:
    return ServiceResponse(
        id=s.id,
        companyId=s.company_id,
        name=s.name,
        description=s.description,
        durationMinutes=s.duration_minutes,
        price=float(s.price),
        category=s.category,
        active=s.active,
        created_at=s.created_at,
    )


@router.post("", response_model=ServiceResponse, status_code=201)
async def create_service(
    data: ServiceCreate,
    current_user: User = Depends(require_roles(*MANAGER_ROLES)),
    service: BeautyServiceService = Depends(get_beauty_service_service),
):
    ensure_company_access(current_user, data.companyId)
    return to_response(service.create_service(data))


@router.get("", response_model=list[ServiceResponse])
async def get_services(
    company_id: Optional[str] = Query(None, alias="companyId"),
    category: Optional[str] = Query(None),
    active_only: bool = Query(False, alias="activeOnly"),
    current_user: User = Depends(get_current_user),
    service: BeautyServiceService = Depends(get_beauty_service_service),
):
    """List services, optionally by category or only active ones"""
    if company_id:
        ensure_company_access(current_user, company_id)
    else:
        company_id = company_scope_for(current_user)
    return [to_response(s) for s in service.get_services(company_id, category, active_only)]


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: str,
    current_user: User = Depends(get_current_user),
    service: BeautyServiceService = Depends(get_beauty_service_service),
):
    return to_response(service.get_service(service_id, company_scope_for(current_user)))


@router.put("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: str,
    data: ServiceUpdate,
    current_user: User = Depends(require_roles(*MANAGER_ROLES)),
    service: BeautyServiceService = Depends(get_beauty_service_service),
):
    return to_response(service.update_service(service_id, data, company_scope_for(current_user)))


@router.patch("/{service_id}/activate", response_model=ServiceResponse)
async def activate_service(
    service_id: str,
    current_user: User = Depends(require_roles(*MANAGER_ROLES)),
    service: BeautyServiceService = Depends(get_beauty_service_service),
):
    return to_response(service.set_active(service_id, True, company_scope_for(current_user)))


@router.patch("/{service_id}/deactivate", response_model=ServiceResponse)
async def deactivate_service(
    service_id: str,
    current_user: User = Depends(require_roles(*MANAGER_ROLES)),
    service: BeautyServiceService = Depends(get_beauty_service_service),
):
    return to_response(service.set_active(service_id, False, company_scope_for(current_user)))


@router.delete("/{service_id}", status_code=204)
async def delete_service(
    service_id: str,
    current_user: User = Depends(require_roles(*MANAGER_ROLES)),
    service: BeautyServiceService = Depends(get_beauty_service_service),
):
    service.delete_service(service_id, company_scope_for(current_user))
    return Response(status_code=204)
