"""Employee router - FastAPI endpoints for employee operations"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import MANAGER_ROLES, company_scope_for, ensure_company_access, get_current_user, require_roles
from ...database import get_db
from ...models import Employee, User
from .schemas import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from .service import EmployeeService

router = APIRouter(prefix="/employees", tags=["Employees"])


def get_employee_service(db: Session = Depends(get_db)) -> EmployeeService:
    """Dependency injection for EmployeeService"""
    return EmployeeService(db)


def to_response(e: Employee) -> EmployeeResponse:
    return EmployeeResponse(
        id=e.id,
        companyId=e.company_id,
        firstName=e.first_name,
        lastName=e.last_name,
        fullName=e.full_name,
        email=e.email,
        phoneNumber=e.phone_number,
        role=e.role,
        active=e.active,
        created_at=e.created_at,
    )


@router.post("", response_model=EmployeeResponse, status_code=201)
async def create_employee(
    data: EmployeeCreate,
    current_user: User = Depends(require_roles(*MANAGER_ROLES)),
    service: EmployeeService = Depends(get_employee_service),
):
    ensure_company_access(current_user, data.companyId)
    return to_response(service.create_employee(data))


@router.get("", response_model=list[EmployeeResponse])
async def get_employees(
    company_id: Optional[str] = Query(None, alias="companyId"),
    active_only: bool = Query(False, alias="activeOnly"),
    current_user: User = Depends(get_current_user),
    service: EmployeeService = Depends(get_employee_service),
):
    if company_id:
        ensure_company_access(current_user, company_id)
    else:
        company_id = company_scope_for(current_user)
    return [to_response(e) for e in service.get_employees(company_id, active_only)]


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: str,
    current_user: User = Depends(get_current_user),
    service: EmployeeService = Depends(get_employee_service),
):
    return to_response(service.get_employee(employee_id, company_scope_for(current_user)))


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: str,
    data: EmployeeUpdate,
    current_user: User = Depends(require_roles(*MANAGER_ROLES)),
    service: EmployeeService = Depends(get_employee_service),
):
    return to_response(service.update_employee(employee_id, data, company_scope_for(current_user)))


@router.delete("/{employee_id}", status_code=204)
async def delete_employee(
    employee_id: str,
    current_user: User = Depends(require_roles(*MANAGER_ROLES)),
    service: EmployeeService = Depends(get_employee_service),
):
    service.delete_employee(employee_id, company_scope_for(current_user))
    return Response(status_code=204)
