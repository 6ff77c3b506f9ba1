"""Service catalogue repository - Database operations for bookable services"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, Service, appointment_services


class ServiceRepository:
    """Repository for service database operations"""

    @staticmethod
    def get_services(
        db: Session,
        company_id: Optional[str] = None,
        category: Optional[str] = None,
        active_only: bool = False,
    ) -> list[Service]:
        query = db.query(Service)
        if company_id:
            query = query.filter(Service.company_id == company_id)
        if category:
            query = query.filter(Service.category.ilike(category))
        if active_only:
            query = query.filter(Service.active.is_(True))
        return query.order_by(Service.name).all()

    @staticmethod
    def get_service_by_id(db: Session, service_id: str, company_id: Optional[str] = None) -> Optional[Service]:
        query = db.query(Service).filter(Service.id == service_id)
        if company_id:
            query = query.filter(Service.company_id == company_id)
        return query.first()

    @staticmethod
    def is_referenced(db: Session, service_id: str) -> bool:
        """True when any appointment books the service, as primary or additional"""
        if db.query(Appointment.id).filter(Appointment.service_id == service_id).first():
            return True
        return (
            db.query(appointment_services.c.appointment_id)
            .filter(appointment_services.c.service_id == service_id)
            .first()
            is not None
        )

    @staticmethod
    def create_service(db: Session, **service_data) -> Service:
        service = Service(**service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        for key, value in updates.items():
            if value is not None and hasattr(service, key):
                setattr(service, key, value)

        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def delete_service(db: Session, service: Service) -> None:
        db.delete(service)
        db.commit()
