"""Customer repository - Database operations for customers"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, Customer


class CustomerRepository:
    """Repository for customer database operations"""

    @staticmethod
    def get_customers(db: Session, search: Optional[str] = None) -> list[Customer]:
        """Get customers, optionally filtered by name, email or phone"""
        query = db.query(Customer)

        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter(
                (Customer.first_name.ilike(search_term))
                | (Customer.last_name.ilike(search_term))
                | (Customer.email.ilike(search_term))
                | (Customer.phone_number.ilike(search_term))
            )

        return query.order_by(Customer.last_name, Customer.first_name).all()

    @staticmethod
    def get_customer_by_id(db: Session, customer_id: str) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.id == customer_id).first()

    @staticmethod
    def get_customer_by_email(db: Session, email: str) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.email == email).first()

    @staticmethod
    def has_appointments(db: Session, customer_id: str) -> bool:
        return db.query(Appointment.id).filter(Appointment.customer_id == customer_id).first() is not None

    @staticmethod
    def create_customer(db: Session, **customer_data) -> Customer:
        customer = Customer(**customer_data)
        db.add(customer)
        db.commit()
        db.refresh(customer)
        return customer

    @staticmethod
    def update_customer(db: Session, customer: Customer, **updates) -> Customer:
        for key, value in updates.items():
            if value is not None and hasattr(customer, key):
                setattr(customer, key, value)

        db.commit()
        db.refresh(customer)
        return customer

    @staticmethod
    def delete_customer(db: Session, customer: Customer) -> None:
        db.delete(customer)
        db.commit()
