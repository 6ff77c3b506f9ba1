"""Service catalogue - Business logic for the treatments a company offers"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Company, Service
from ...shared.exceptions import NotFoundError, ValidationError
from .repository import ServiceRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


class BeautyServiceService:
    """Service layer for the service catalogue"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def get_services(
        self,
        company_id: Optional[str] = None,
        category: Optional[str] = None,
        active_only: bool = False,
    ) -> list[Service]:
        return self.repo.get_services(self.db, company_id, category, active_only)

    def get_service(self, service_id: str, company_id: Optional[str] = None) -> Service:
        service = self.repo.get_service_by_id(self.db, service_id, company_id)
        if not service:
            raise NotFoundError("Service", service_id)
        return service

    def create_service(self, data: ServiceCreate) -> Service:
        if not self.db.query(Company).filter(Company.id == data.companyId).first():
            raise NotFoundError("Company", data.companyId)

        service = self.repo.create_service(
            self.db,
            company_id=data.companyId,
            name=data.name,
            description=data.description,
            duration_minutes=data.durationMinutes,
            price=data.price,
            category=data.category,
            active=True,
        )
        logger.info(f"✅ Service created: {service.id} ({service.name}, {service.duration_minutes} min)")
        return service

    def update_service(self, service_id: str, data: ServiceUpdate, company_id: Optional[str] = None) -> Service:
        service = self.get_service(service_id, company_id)
        return self.repo.update_service(
            self.db,
            service,
            name=data.name,
            description=data.description,
            duration_minutes=data.durationMinutes,
            price=data.price,
            category=data.category,
            active=data.active,
        )

    def set_active(self, service_id: str, active: bool, company_id: Optional[str] = None) -> Service:
        service = self.get_service(service_id, company_id)
        return self.repo.update_service(self.db, service, active=active)

    def delete_service(self, service_id: str, company_id: Optional[str] = None) -> None:
        service = self.get_service(service_id, company_id)
        if self.repo.is_referenced(self.db, service.id):
            logger.warning(f"⚠️ Refusing to delete service {service_id}: used by appointments")
            raise ValidationError("Service is booked in appointments; deactivate it instead")
        self.repo.delete_service(self.db, service)
        logger.info(f"🗑️ Service deleted: {service_id}")
