"""Appointment router - FastAPI endpoints for booking and lifecycle operations"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import (
    MANAGER_ROLES,
    STAFF_ROLES,
    company_scope_for,
    ensure_company_access,
    get_current_user,
    require_roles,
)
from ...database import get_db
from ...models import Appointment, AppointmentStatus, User
from ..events import EventBus, get_event_bus
from .schemas import AppointmentCreate, AppointmentResponse, AppointmentUpdate, AvailabilityResponse
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(
    db: Session = Depends(get_db),
    event_bus: EventBus = Depends(get_event_bus),
) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db, event_bus)


def to_response(a: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=a.id,
        companyId=a.company_id,
        employeeId=a.employee_id,
        employeeName=a.employee.full_name if a.employee else None,
        customerId=a.customer_id,
        customerName=a.customer.full_name if a.customer else None,
        serviceId=a.service_id,
        serviceName=a.service.name if a.service else None,
        additionalServiceIds=a.additional_service_ids,
        startTime=a.start_time,
        endTime=a.end_time,
        durationMinutes=a.duration_minutes,
        status=a.status,
        notes=a.notes,
        totalPrice=float(a.total_price or 0),
        created_at=a.created_at,
        updated_at=a.updated_at,
    )


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Book an appointment; 409 when the employee is already busy"""
    ensure_company_access(current_user, data.companyId)
    return to_response(service.create_appointment(data))


@router.get("", response_model=list[AppointmentResponse])
async def list_appointments(
    company_id: Optional[str] = Query(None, alias="companyId"),
    employee_id: Optional[str] = Query(None, alias="employeeId"),
    customer_id: Optional[str] = Query(None, alias="customerId"),
    status: Optional[AppointmentStatus] = Query(None),
    start_from: Optional[datetime] = Query(None, alias="from"),
    start_to: Optional[datetime] = Query(None, alias="to"),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Search appointments within the caller's company"""
    if company_id:
        ensure_company_access(current_user, company_id)
    else:
        company_id = company_scope_for(current_user)

    appointments = service.list_appointments(
        company_id=company_id,
        employee_id=employee_id,
        customer_id=customer_id,
        status=status,
        start_from=start_from,
        start_to=start_to,
    )
    return [to_response(a) for a in appointments]


@router.get("/availability", response_model=AvailabilityResponse)
async def check_availability(
    company_id: str = Query(..., alias="companyId"),
    employee_id: str = Query(..., alias="employeeId"),
    start: datetime = Query(...),
    end: datetime = Query(...),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Whether the employee is free for [start, end)"""
    ensure_company_access(current_user, company_id)
    return AvailabilityResponse(
        companyId=company_id,
        employeeId=employee_id,
        startTime=start,
        endTime=end,
        available=service.is_slot_available(company_id, employee_id, start, end),
    )


@router.get("/by-date/{day}", response_model=list[AppointmentResponse])
async def get_appointments_by_date(
    day: date,
    company_id: Optional[str] = Query(None, alias="companyId"),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    if company_id:
        ensure_company_access(current_user, company_id)
    else:
        company_id = company_scope_for(current_user)
    return [to_response(a) for a in service.get_appointments_by_date(day, company_id)]


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: str,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return to_response(service.get_appointment(appointment_id, company_scope_for(current_user)))


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: str,
    data: AppointmentUpdate,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Update an appointment (status changes go through the lifecycle endpoints)"""
    appointment = service.update_appointment(appointment_id, data, company_scope_for(current_user))
    return to_response(appointment)


@router.delete("/{appointment_id}", status_code=204)
async def delete_appointment(
    appointment_id: str,
    current_user: User = Depends(require_roles(*MANAGER_ROLES)),
    service: AppointmentService = Depends(get_appointment_service),
):
    service.delete_appointment(appointment_id, company_scope_for(current_user))
    return Response(status_code=204)


# ============================================================================
# LIFECYCLE
# ============================================================================


@router.post("/{appointment_id}/confirm", response_model=AppointmentResponse)
async def confirm_appointment(
    appointment_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: AppointmentService = Depends(get_appointment_service),
):
    return to_response(service.confirm_appointment(appointment_id, company_scope_for(current_user)))


@router.post("/{appointment_id}/start", response_model=AppointmentResponse)
async def start_appointment(
    appointment_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: AppointmentService = Depends(get_appointment_service),
):
    return to_response(service.start_appointment(appointment_id, company_scope_for(current_user)))


@router.post("/{appointment_id}/complete", response_model=AppointmentResponse)
async def complete_appointment(
    appointment_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: AppointmentService = Depends(get_appointment_service),
):
    return to_response(service.complete_appointment(appointment_id, company_scope_for(current_user)))


@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: AppointmentService = Depends(get_appointment_service),
):
    return to_response(service.cancel_appointment(appointment_id, company_scope_for(current_user)))


@router.post("/{appointment_id}/no-show", response_model=AppointmentResponse)
async def mark_no_show(
    appointment_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: AppointmentService = Depends(get_appointment_service),
):
    return to_response(service.mark_no_show(appointment_id, company_scope_for(current_user)))


# ============================================================================
# ADDITIONAL SERVICES
# ============================================================================


@router.post("/{appointment_id}/services/{service_id}", response_model=AppointmentResponse)
async def add_service(
    appointment_id: str,
    service_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: AppointmentService = Depends(get_appointment_service),
):
    return to_response(service.add_service(appointment_id, service_id, company_scope_for(current_user)))


@router.delete("/{appointment_id}/services/{service_id}", response_model=AppointmentResponse)
async def remove_service(
    appointment_id: str,
    service_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: AppointmentService = Depends(get_appointment_service),
):
    return to_response(service.remove_service(appointment_id, service_id, company_scope_for(current_user)))
