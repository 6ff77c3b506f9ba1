"""Appointment service - Booking, conflict checks and lifecycle transitions"""

import logging
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Iterator, Optional

from sqlalchemy.orm import Session

from ...models import (
    Appointment,
    AppointmentStatus,
    Company,
    Customer,
    Employee,
    Service,
)
from ...shared.exceptions import NotFoundError, SlotConflictError, ValidationError
from ...shared.validators import to_utc_naive
from ..events import AppointmentCreated, AppointmentStatusChanged, EventBus
from .lifecycle import INITIAL_STATUSES, TransitionPolicy, apply_transition, default_policy
from .repository import AppointmentRepository
from .scheduling import SlotLockRegistry, acquire_advisory_lock, is_slot_available, slot_locks
from .schemas import AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)


class AppointmentService:
    """
    Sole writer of appointment records.

    Every write that can claim a slot runs its conflict check and its commit
    while holding the slot lock for (company, employee), so concurrent
    bookings of the same slot produce exactly one appointment. Events are
    published only after the commit succeeded.
    """

    def __init__(
        self,
        db: Session,
        event_bus: EventBus,
        slot_lock_registry: Optional[SlotLockRegistry] = None,
        policy: Optional[TransitionPolicy] = None,
    ):
        self.db = db
        self.repo = AppointmentRepository()
        self.event_bus = event_bus
        self.slot_locks = slot_lock_registry or slot_locks
        self.policy = policy or default_policy()

    # ========================================================================
    # LOOKUPS
    # ========================================================================

    def _require(self, model, entity_id: Optional[str], entity: str):
        if not entity_id:
            raise ValidationError(f"{entity} id is required")
        obj = self.db.query(model).filter(model.id == entity_id).first()
        if not obj:
            raise NotFoundError(entity, entity_id)
        return obj

    def _require_in_company(self, model, entity_id: str, entity: str, company_id: str):
        obj = self._require(model, entity_id, entity)
        if obj.company_id != company_id:
            raise ValidationError(f"{entity} {entity_id} does not belong to company {company_id}")
        return obj

    def get_appointment(self, appointment_id: str, company_id: Optional[str] = None) -> Appointment:
        """Get an appointment; company_id confines the lookup to one tenant"""
        appointment = self.repo.get_by_id(self.db, appointment_id, company_id)
        if not appointment:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    def list_appointments(
        self,
        company_id: Optional[str] = None,
        employee_id: Optional[str] = None,
        customer_id: Optional[str] = None,
        status: Optional[AppointmentStatus] = None,
        start_from: Optional[datetime] = None,
        start_to: Optional[datetime] = None,
    ) -> list[Appointment]:
        return self.repo.list_appointments(
            self.db,
            company_id=company_id,
            employee_id=employee_id,
            customer_id=customer_id,
            status=status,
            start_from=to_utc_naive(start_from),
            start_to=to_utc_naive(start_to),
        )

    def get_appointments_by_date(self, day: date, company_id: Optional[str] = None) -> list[Appointment]:
        """Appointments starting on the given (UTC) calendar day"""
        day_start = datetime.combine(day, time.min)
        return self.repo.list_appointments(
            self.db,
            company_id=company_id,
            start_from=day_start,
            start_to=day_start + timedelta(days=1),
        )

    def is_slot_available(
        self,
        company_id: str,
        employee_id: str,
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[str] = None,
    ) -> bool:
        return is_slot_available(
            self.db, company_id, employee_id, start, end, exclude_appointment_id=exclude_appointment_id
        )

    # ========================================================================
    # BOOKING
    # ========================================================================

    @contextmanager
    def _slot_guard(self, company_id: str, employee_id: str) -> Iterator[None]:
        """Serialize check-then-write for one employee's calendar until commit"""
        with self.slot_locks.hold(company_id, employee_id):
            try:
                acquire_advisory_lock(self.db, company_id, employee_id)
                yield
            except Exception:
                self.db.rollback()
                raise

    def create_appointment(self, data: AppointmentCreate) -> Appointment:
        """Book an appointment, rejecting it if the employee is already busy"""
        start = to_utc_naive(data.startTime)
        end = to_utc_naive(data.endTime)
        if start is None:
            raise ValidationError("Start time is required")
        if end is not None and end <= start:
            raise ValidationError("End time must be after start time")

        status = data.status or AppointmentStatus.REQUESTED
        if status not in INITIAL_STATUSES:
            raise ValidationError(f"Appointments cannot be created in status {status.value}")

        company = self._require(Company, data.companyId, "Company")
        employee = self._require_in_company(Employee, data.employeeId, "Employee", company.id)
        customer = self._require(Customer, data.customerId, "Customer")
        primary = self._require_in_company(Service, data.serviceId, "Service", company.id)

        additional = []
        for service_id in dict.fromkeys(data.additionalServiceIds):
            if service_id == primary.id:
                continue
            additional.append(self._require_in_company(Service, service_id, "Service", company.id))

        if end is None:
            end = start + timedelta(minutes=primary.duration_minutes)

        total_price = data.totalPrice
        if total_price is None:
            total_price = Decimal(primary.price) + sum((Decimal(s.price) for s in additional), Decimal("0"))

        appointment = Appointment(
            company_id=company.id,
            employee_id=employee.id,
            customer_id=customer.id,
            service_id=primary.id,
            start_time=start,
            end_time=end,
            status=status,
            notes=data.notes,
            total_price=total_price,
        )
        appointment.additional_services = additional

        logger.info(
            f"📥 Booking appointment: company={company.id}, employee={employee.id}, "
            f"{start.isoformat()} - {end.isoformat()}"
        )

        with self._slot_guard(company.id, employee.id):
            if not is_slot_available(self.db, company.id, employee.id, start, end):
                logger.warning(
                    f"⚠️ Slot conflict for employee {employee.id}: {start.isoformat()} - {end.isoformat()}"
                )
                raise SlotConflictError()
            appointment = self.repo.save(self.db, appointment)

        logger.info(f"✅ Appointment created: {appointment.id}")
        self.event_bus.publish(
            AppointmentCreated(
                appointment_id=appointment.id,
                company_id=appointment.company_id,
                employee_id=appointment.employee_id,
                customer_id=appointment.customer_id,
                start_time=appointment.start_time,
                end_time=appointment.end_time,
                status=AppointmentStatus(appointment.status),
            )
        )
        return appointment

    def update_appointment(
        self, appointment_id: str, data: AppointmentUpdate, company_id: Optional[str] = None
    ) -> Appointment:
        """Partial update; a moved slot is re-checked against everyone but itself"""
        appointment = self.get_appointment(appointment_id, company_id)

        employee_id = appointment.employee_id
        if data.employeeId is not None and data.employeeId != appointment.employee_id:
            employee_id = self._require_in_company(
                Employee, data.employeeId, "Employee", appointment.company_id
            ).id
        if data.customerId is not None:
            self._require(Customer, data.customerId, "Customer")
        if data.serviceId is not None:
            self._require_in_company(Service, data.serviceId, "Service", appointment.company_id)

        start = to_utc_naive(data.startTime) if data.startTime is not None else appointment.start_time
        end = to_utc_naive(data.endTime) if data.endTime is not None else appointment.end_time
        if end <= start:
            raise ValidationError("End time must be after start time")

        slot_changed = (
            employee_id != appointment.employee_id
            or start != appointment.start_time
            or end != appointment.end_time
        )

        def apply_updates():
            appointment.employee_id = employee_id
            appointment.start_time = start
            appointment.end_time = end
            if data.customerId is not None:
                appointment.customer_id = data.customerId
            if data.serviceId is not None:
                appointment.service_id = data.serviceId
            if data.notes is not None:
                appointment.notes = data.notes
            if data.totalPrice is not None:
                appointment.total_price = data.totalPrice

        if slot_changed and appointment.is_active:
            with self._slot_guard(appointment.company_id, employee_id):
                if not is_slot_available(
                    self.db,
                    appointment.company_id,
                    employee_id,
                    start,
                    end,
                    exclude_appointment_id=appointment.id,
                ):
                    logger.warning(f"⚠️ Slot conflict moving appointment {appointment.id}")
                    raise SlotConflictError()
                apply_updates()
                appointment = self.repo.save(self.db, appointment)
        else:
            apply_updates()
            appointment = self.repo.save(self.db, appointment)

        logger.info(f"Appointment updated: {appointment.id}")
        return appointment

    def delete_appointment(self, appointment_id: str, company_id: Optional[str] = None) -> None:
        appointment = self.get_appointment(appointment_id, company_id)
        self.repo.delete(self.db, appointment)
        logger.info(f"🗑️ Appointment deleted: {appointment_id}")

    # ========================================================================
    # LIFECYCLE
    # ========================================================================

    def _transition(self, appointment_id: str, trigger: str, company_id: Optional[str]) -> Appointment:
        appointment = self.get_appointment(appointment_id, company_id)
        old_status = AppointmentStatus(appointment.status)

        changed = apply_transition(appointment, trigger, self.policy)
        # Lenient no-ops are re-persisted unchanged
        appointment = self.repo.save(self.db, appointment)

        if changed:
            new_status = AppointmentStatus(appointment.status)
            logger.info(f"Appointment {appointment.id}: {old_status.value} → {new_status.value}")
            self.event_bus.publish(
                AppointmentStatusChanged(
                    appointment_id=appointment.id,
                    company_id=appointment.company_id,
                    old_status=old_status,
                    new_status=new_status,
                )
            )
        return appointment

    def confirm_appointment(self, appointment_id: str, company_id: Optional[str] = None) -> Appointment:
        return self._transition(appointment_id, "confirm", company_id)

    def start_appointment(self, appointment_id: str, company_id: Optional[str] = None) -> Appointment:
        return self._transition(appointment_id, "start", company_id)

    def complete_appointment(self, appointment_id: str, company_id: Optional[str] = None) -> Appointment:
        return self._transition(appointment_id, "complete", company_id)

    def cancel_appointment(self, appointment_id: str, company_id: Optional[str] = None) -> Appointment:
        return self._transition(appointment_id, "cancel", company_id)

    def mark_no_show(self, appointment_id: str, company_id: Optional[str] = None) -> Appointment:
        return self._transition(appointment_id, "mark_no_show", company_id)

    # ========================================================================
    # ADDITIONAL SERVICES
    # ========================================================================

    def add_service(
        self, appointment_id: str, service_id: str, company_id: Optional[str] = None
    ) -> Appointment:
        """
        Attach an extra service; allowed in any status, time and price untouched.

        The primary service is never listed as an additional one.
        """
        appointment = self.get_appointment(appointment_id, company_id)
        service = self._require_in_company(Service, service_id, "Service", appointment.company_id)

        if service.id == appointment.service_id:
            logger.info(f"Service {service.id} is already the primary service of appointment {appointment.id}")
            return appointment
        if service not in appointment.additional_services:
            appointment.additional_services.append(service)
        return self.repo.save(self.db, appointment)

    def remove_service(
        self, appointment_id: str, service_id: str, company_id: Optional[str] = None
    ) -> Appointment:
        appointment = self.get_appointment(appointment_id, company_id)
        appointment.additional_services = [
            s for s in appointment.additional_services if s.id != service_id
        ]
        return self.repo.save(self.db, appointment)
