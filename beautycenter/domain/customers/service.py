"""Customer service - Business logic for customer operations"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Customer
from ...shared.exceptions import AlreadyExistsError, NotFoundError, ValidationError
from .repository import CustomerRepository
from .schemas import CustomerCreate, CustomerUpdate

logger = logging.getLogger(__name__)


class CustomerService:
    """Service layer for customer business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CustomerRepository()

    def get_customers(self, search: Optional[str] = None) -> list[Customer]:
        return self.repo.get_customers(self.db, search)

    def get_customer(self, customer_id: str) -> Customer:
        customer = self.repo.get_customer_by_id(self.db, customer_id)
        if not customer:
            raise NotFoundError("Customer", customer_id)
        return customer

    def _ensure_email_free(self, email: Optional[str], customer_id: Optional[str] = None) -> None:
        if not email:
            return
        existing = self.repo.get_customer_by_email(self.db, email)
        if existing and existing.id != customer_id:
            raise AlreadyExistsError(f"Customer with email '{email}' already exists")

    def create_customer(self, data: CustomerCreate) -> Customer:
        self._ensure_email_free(data.email)

        customer = self.repo.create_customer(
            self.db,
            first_name=data.firstName,
            last_name=data.lastName,
            email=data.email,
            phone_number=data.phoneNumber,
            address=data.address,
        )
        logger.info(f"✅ Customer created: {customer.id}")
        return customer

    def update_customer(self, customer_id: str, data: CustomerUpdate) -> Customer:
        customer = self.get_customer(customer_id)
        self._ensure_email_free(data.email, customer.id)

        updates = {}
        if data.firstName is not None:
            updates["first_name"] = data.firstName
        if data.lastName is not None:
            updates["last_name"] = data.lastName
        if data.email is not None:
            updates["email"] = data.email
        if data.phoneNumber is not None:
            updates["phone_number"] = data.phoneNumber
        if data.address is not None:
            updates["address"] = data.address

        return self.repo.update_customer(self.db, customer, **updates)

    def delete_customer(self, customer_id: str) -> None:
        customer = self.get_customer(customer_id)
        if self.repo.has_appointments(self.db, customer.id):
            raise ValidationError("Customer has appointments and cannot be deleted")

        self.repo.delete_customer(self.db, customer)
        logger.info(f"🗑️ Customer deleted: {customer_id}")
