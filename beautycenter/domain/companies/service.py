"""Company service - Business logic for company operations"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Company
from ...shared.exceptions import AlreadyExistsError, NotFoundError
from .repository import CompanyRepository
from .schemas import CompanyCreate, CompanyUpdate

logger = logging.getLogger(__name__)

# wire name -> column
FIELD_MAP = {
    "name": "name",
    "description": "description",
    "address": "address",
    "city": "city",
    "state": "state",
    "zipCode": "zip_code",
    "country": "country",
    "phoneNumber": "phone_number",
    "email": "email",
    "website": "website",
    "logoUrl": "logo_url",
    "active": "active",
}


class CompanyService:
    """Service layer for company business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CompanyRepository()

    def get_companies(self, company_id: Optional[str] = None) -> list[Company]:
        return self.repo.get_companies(self.db, company_id)

    def get_active_companies(self) -> list[Company]:
        return self.repo.get_active_companies(self.db)

    def search_companies(self, name: str) -> list[Company]:
        return self.repo.search_by_name(self.db, name.strip())

    def get_company(self, company_id: str) -> Company:
        company = self.repo.get_company_by_id(self.db, company_id)
        if not company:
            raise NotFoundError("Company", company_id)
        return company

    def create_company(self, data: CompanyCreate) -> Company:
        """Create a new company; names are unique"""
        if self.repo.get_company_by_name(self.db, data.name):
            logger.warning(f"⚠️ Company name already taken: {data.name}")
            raise AlreadyExistsError(f"Company with name '{data.name}' already exists")

        values = {FIELD_MAP[k]: v for k, v in data.model_dump().items() if k in FIELD_MAP}
        values["active"] = True
        company = self.repo.create_company(self.db, **values)
        logger.info(f"✅ Company created: {company.id} ({company.name})")
        return company

    def update_company(self, company_id: str, data: CompanyUpdate) -> Company:
        company = self.get_company(company_id)

        if data.name and data.name != company.name:
            existing = self.repo.get_company_by_name(self.db, data.name)
            if existing and existing.id != company.id:
                raise AlreadyExistsError(f"Company with name '{data.name}' already exists")

        updates = {FIELD_MAP[k]: v for k, v in data.model_dump(exclude_unset=True).items() if k in FIELD_MAP}
        company = self.repo.update_company(self.db, company, **updates)
        logger.info(f"Company updated: {company.id}")
        return company

    def delete_company(self, company_id: str) -> None:
        company = self.get_company(company_id)
        self.repo.delete_company(self.db, company)
        logger.info(f"🗑️ Company deleted: {company_id}")

    def set_active(self, company_id: str, active: bool) -> Company:
        company = self.get_company(company_id)
        company = self.repo.update_company(self.db, company, active=active)
        logger.info(f"Company {company_id} {'activated' if active else 'deactivated'}")
        return company
