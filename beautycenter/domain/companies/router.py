"""Company router - FastAPI endpoints for company operations"""

import logging

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import company_scope_for, ensure_company_access, get_current_user, require_roles
from ...database import get_db
from ...models import Company, Role, User
from .schemas import CompanyCreate, CompanyResponse, CompanyUpdate
from .service import CompanyService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["Companies"])


def get_company_service(db: Session = Depends(get_db)) -> CompanyService:
    """Dependency injection for CompanyService"""
    return CompanyService(db)


def to_response(c: Company) -> CompanyResponse:
    return CompanyResponse(
        id=c.id,
        name=c.name,
        description=c.description,
        address=c.address,
        city=c.city,
        state=c.state,
        zipCode=c.zip_code,
        country=c.country,
        phoneNumber=c.phone_number,
        email=c.email,
        website=c.website,
        logoUrl=c.logo_url,
        active=c.active,
        fullAddress=c.full_address,
        hasValidAddress=c.has_valid_address,
        hasValidContactInfo=c.has_valid_contact_info,
        created_at=c.created_at,
        updated_at=c.updated_at,
    )


def _visible(companies: list[Company], user: User) -> list[Company]:
    if user.is_admin:
        return companies
    return [c for c in companies if c.id == user.company_id]


@router.post("", response_model=CompanyResponse, status_code=201)
async def create_company(
    data: CompanyCreate,
    current_user: User = Depends(require_roles(Role.ADMIN)),
    service: CompanyService = Depends(get_company_service),
):
    """Create a new company"""
    return to_response(service.create_company(data))


@router.get("", response_model=list[CompanyResponse])
async def get_companies(
    current_user: User = Depends(get_current_user),
    service: CompanyService = Depends(get_company_service),
):
    """All companies for admins; the caller's own company otherwise"""
    return [to_response(c) for c in service.get_companies(company_scope_for(current_user))]


@router.get("/active", response_model=list[CompanyResponse])
async def get_active_companies(
    current_user: User = Depends(get_current_user),
    service: CompanyService = Depends(get_company_service),
):
    return [to_response(c) for c in _visible(service.get_active_companies(), current_user)]


@router.get("/search", response_model=list[CompanyResponse])
async def search_companies(
    name: str = Query(..., min_length=1),
    current_user: User = Depends(get_current_user),
    service: CompanyService = Depends(get_company_service),
):
    """Companies whose name contains the given text (case-insensitive)"""
    return [to_response(c) for c in _visible(service.search_companies(name), current_user)]


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company(
    company_id: str,
    current_user: User = Depends(get_current_user),
    service: CompanyService = Depends(get_company_service),
):
    ensure_company_access(current_user, company_id)
    return to_response(service.get_company(company_id))


@router.put("/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: str,
    data: CompanyUpdate,
    current_user: User = Depends(require_roles(Role.ADMIN)),
    service: CompanyService = Depends(get_company_service),
):
    return to_response(service.update_company(company_id, data))


@router.delete("/{company_id}", status_code=204)
async def delete_company(
    company_id: str,
    current_user: User = Depends(require_roles(Role.ADMIN)),
    service: CompanyService = Depends(get_company_service),
):
    service.delete_company(company_id)
    return Response(status_code=204)


@router.patch("/{company_id}/activate", response_model=CompanyResponse)
async def activate_company(
    company_id: str,
    current_user: User = Depends(require_roles(Role.ADMIN)),
    service: CompanyService = Depends(get_company_service),
):
    return to_response(service.set_active(company_id, True))


@router.patch("/{company_id}/deactivate", response_model=CompanyResponse)
async def deactivate_company(
    company_id: str,
    current_user: User = Depends(require_roles(Role.ADMIN)),
    service: CompanyService = Depends(get_company_service),
):
    return to_response(service.set_active(company_id, False))
