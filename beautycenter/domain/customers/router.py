"""Customer router - FastAPI endpoints for customer operations"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import MANAGER_ROLES, STAFF_ROLES, get_current_user, require_roles
from ...database import get_db
from ...models import Customer, User
from .schemas import CustomerCreate, CustomerResponse, CustomerUpdate
from .service import CustomerService

router = APIRouter(prefix="/customers", tags=["Customers"])


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    """Dependency injection for CustomerService"""
    return CustomerService(db)


def to_response(c: Customer) -> CustomerResponse:
    return CustomerResponse(
        id=c.id,
        firstName=c.first_name,
        lastName=c.last_name,
        fullName=c.full_name,
        email=c.email,
        phoneNumber=c.phone_number,
        address=c.address,
        created_at=c.created_at,
    )


@router.post("", response_model=CustomerResponse, status_code=201)
async def create_customer(
    data: CustomerCreate,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: CustomerService = Depends(get_customer_service),
):
    return to_response(service.create_customer(data))


@router.get("", response_model=list[CustomerResponse])
async def get_customers(
    search: Optional[str] = Query(None),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: CustomerService = Depends(get_customer_service),
):
    """List customers, optionally searching name, email and phone"""
    return [to_response(c) for c in service.get_customers(search)]


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: str,
    current_user: User = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
):
    return to_response(service.get_customer(customer_id))


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: str,
    data: CustomerUpdate,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: CustomerService = Depends(get_customer_service),
):
    return to_response(service.update_customer(customer_id, data))


@router.delete("/{customer_id}", status_code=204)
async def delete_customer(
    customer_id: str,
    current_user: User = Depends(require_roles(*MANAGER_ROLES)),
    service: CustomerService = Depends(get_customer_service),
):
    service.delete_customer(customer_id)
    return Response(status_code=204)
