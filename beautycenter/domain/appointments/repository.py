"""Appointment repository - Database operations for appointments"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models import ACTIVE_STATUSES, Appointment, AppointmentStatus


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def find_overlapping(
        db: Session,
        company_id: str,
        employee_id: str,
        start: datetime,
        end: datetime,
        exclude_appointment_id: Optional[str] = None,
    ) -> list[Appointment]:
        """Active appointments of the employee whose [start, end) overlaps the window"""
        query = db.query(Appointment).filter(
            Appointment.company_id == company_id,
            Appointment.employee_id == employee_id,
            Appointment.status.in_(ACTIVE_STATUSES),
            Appointment.start_time < end,
            Appointment.end_time > start,
        )
        if exclude_appointment_id:
            query = query.filter(Appointment.id != exclude_appointment_id)
        return query.order_by(Appointment.start_time).all()

    @staticmethod
    def get_by_id(db: Session, appointment_id: str, company_id: Optional[str] = None) -> Optional[Appointment]:
        query = (
            db.query(Appointment)
            .options(selectinload(Appointment.additional_services))
            .filter(Appointment.id == appointment_id)
        )
        if company_id:
            query = query.filter(Appointment.company_id == company_id)
        return query.first()

    @staticmethod
    def list_appointments(
        db: Session,
        company_id: Optional[str] = None,
        employee_id: Optional[str] = None,
        customer_id: Optional[str] = None,
        status: Optional[AppointmentStatus] = None,
        start_from: Optional[datetime] = None,
        start_to: Optional[datetime] = None,
    ) -> list[Appointment]:
        """Search appointments; every filter is optional"""
        query = db.query(Appointment).options(selectinload(Appointment.additional_services))

        if company_id:
            query = query.filter(Appointment.company_id == company_id)
        if employee_id:
            query = query.filter(Appointment.employee_id == employee_id)
        if customer_id:
            query = query.filter(Appointment.customer_id == customer_id)
        if status:
            query = query.filter(Appointment.status == status)
        if start_from:
            query = query.filter(Appointment.start_time >= start_from)
        if start_to:
            query = query.filter(Appointment.start_time < start_to)

        return query.order_by(Appointment.start_time).all()

    @staticmethod
    def save(db: Session, appointment: Appointment) -> Appointment:
        """Insert or update, assigning an id on insert"""
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def delete(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.commit()
