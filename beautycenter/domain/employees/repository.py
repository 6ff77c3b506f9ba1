"""Employee repository - Database operations for employees"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, Employee


class EmployeeRepository:
    """Repository for employee database operations"""

    @staticmethod
    def get_employees(db: Session, company_id: Optional[str] = None, active_only: bool = False) -> list[Employee]:
        query = db.query(Employee)
        if company_id:
            query = query.filter(Employee.company_id == company_id)
        if active_only:
            query = query.filter(Employee.active.is_(True))
        return query.order_by(Employee.last_name, Employee.first_name).all()

    @staticmethod
    def get_employee_by_id(db: Session, employee_id: str, company_id: Optional[str] = None) -> Optional[Employee]:
        query = db.query(Employee).filter(Employee.id == employee_id)
        if company_id:
            query = query.filter(Employee.company_id == company_id)
        return query.first()

    @staticmethod
    def has_appointments(db: Session, employee_id: str) -> bool:
        return db.query(Appointment.id).filter(Appointment.employee_id == employee_id).first() is not None

    @staticmethod
    def create_employee(db: Session, **employee_data) -> Employee:
        employee = Employee(**employee_data)
        db.add(employee)
        db.commit()
        db.refresh(employee)
        return employee

    @staticmethod
    def update_employee(db: Session, employee: Employee, **updates) -> Employee:
        for key, value in updates.items():
            if value is not None and hasattr(employee, key):
                setattr(employee, key, value)

        db.commit()
        db.refresh(employee)
        return employee

    @staticmethod
    def delete_employee(db: Session, employee: Employee) -> None:
        db.delete(employee)
        db.commit()
