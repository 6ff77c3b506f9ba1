"""Location router - FastAPI endpoints for company locations"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import MANAGER_ROLES, company_scope_for, ensure_company_access, get_current_user, require_roles
from ...database import get_db
from ...models import Location, User
from .schemas import LocationCreate, LocationResponse, LocationUpdate
from .service import LocationService

router = APIRouter(prefix="/locations", tags=["Locations"])


def get_location_service(db: Session = Depends(get_db)) -> LocationService:
    """Dependency injection for LocationService"""
    return LocationService(db)


def to_response(loc: Location) -> LocationResponse:
    return LocationResponse(
        id=loc.id,
        companyId=loc.company_id,
        name=loc.name,
        address=loc.address,
        city=loc.city,
        state=loc.state,
        zipCode=loc.zip_code,
        country=loc.country,
        phoneNumber=loc.phone_number,
        email=loc.email,
        latitude=loc.latitude,
        longitude=loc.longitude,
        fullAddress=loc.full_address,
        hasValidCoordinates=loc.has_valid_coordinates,
        active=loc.active,
        created_at=loc.created_at,
    )


@router.post("", response_model=LocationResponse, status_code=201)
async def create_location(
    data: LocationCreate,
    current_user: User = Depends(require_roles(*MANAGER_ROLES)),
    service: LocationService = Depends(get_location_service),
):
    ensure_company_access(current_user, data.companyId)
    return to_response(service.create_location(data))


@router.get("", response_model=list[LocationResponse])
async def get_locations(
    company_id: Optional[str] = Query(None, alias="companyId"),
    active_only: bool = Query(False, alias="activeOnly"),
    current_user: User = Depends(get_current_user),
    service: LocationService = Depends(get_location_service),
):
    if company_id:
        ensure_company_access(current_user, company_id)
    else:
        company_id = company_scope_for(current_user)
    return [to_response(loc) for loc in service.get_locations(company_id, active_only)]


@router.get("/{location_id}", response_model=LocationResponse)
async def get_location(
    location_id: str,
    current_user: User = Depends(get_current_user),
    service: LocationService = Depends(get_location_service),
):
    return to_response(service.get_location(location_id, company_scope_for(current_user)))


@router.put("/{location_id}", response_model=LocationResponse)
async def update_location(
    location_id: str,
    data: LocationUpdate,
    current_user: User = Depends(require_roles(*MANAGER_ROLES)),
    service: LocationService = Depends(get_location_service),
):
    return to_response(service.update_location(location_id, data, company_scope_for(current_user)))


@router.delete("/{location_id}", status_code=204)
async def delete_location(
    location_id: str,
    current_user: User = Depends(require_roles(*MANAGER_ROLES)),
    service: LocationService = Depends(get_location_service),
):
    service.delete_location(location_id, company_scope_for(current_user))
    return Response(status_code=204)
