"""Employee service - Business logic for employee operations"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Company, Employee
from ...shared.exceptions import NotFoundError, ValidationError
from .repository import EmployeeRepository
from .schemas import EmployeeCreate, EmployeeUpdate

logger = logging.getLogger(__name__)


class EmployeeService:
    """Service layer for employee business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EmployeeRepository()

    def get_employees(self, company_id: Optional[str] = None, active_only: bool = False) -> list[Employee]:
        return self.repo.get_employees(self.db, company_id, active_only)

    def get_employee(self, employee_id: str, company_id: Optional[str] = None) -> Employee:
        employee = self.repo.get_employee_by_id(self.db, employee_id, company_id)
        if not employee:
            raise NotFoundError("Employee", employee_id)
        return employee

    def create_employee(self, data: EmployeeCreate) -> Employee:
        if not self.db.query(Company).filter(Company.id == data.companyId).first():
            raise NotFoundError("Company", data.companyId)

        employee = self.repo.create_employee(
            self.db,
            company_id=data.companyId,
            first_name=data.firstName,
            last_name=data.lastName,
            email=data.email,
            phone_number=data.phoneNumber,
            role=data.role,
            active=True,
        )
        logger.info(f"✅ Employee created: {employee.id} ({employee.full_name})")
        return employee

    def update_employee(
        self, employee_id: str, data: EmployeeUpdate, company_id: Optional[str] = None
    ) -> Employee:
        employee = self.get_employee(employee_id, company_id)
        return self.repo.update_employee(
            self.db,
            employee,
            first_name=data.firstName,
            last_name=data.lastName,
            email=data.email,
            phone_number=data.phoneNumber,
            role=data.role,
            active=data.active,
        )

    def delete_employee(self, employee_id: str, company_id: Optional[str] = None) -> None:
        """Delete an employee with no booking history"""
        employee = self.get_employee(employee_id, company_id)
        if self.repo.has_appointments(self.db, employee.id):
            logger.warning(f"⚠️ Refusing to delete employee {employee_id}: has appointments")
            raise ValidationError("Employee has appointments; deactivate the employee instead")

        self.repo.delete_employee(self.db, employee)
        logger.info(f"🗑️ Employee deleted: {employee_id}")
