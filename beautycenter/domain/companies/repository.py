"""Company repository - Database operations for companies"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Company


class CompanyRepository:
    """Repository for company database operations"""

    @staticmethod
    def get_companies(db: Session, company_id: Optional[str] = None) -> list[Company]:
        """All companies, or just one when the caller is confined to a company"""
        query = db.query(Company)
        if company_id:
            query = query.filter(Company.id == company_id)
        return query.order_by(Company.name).all()

    @staticmethod
    def get_active_companies(db: Session) -> list[Company]:
        return db.query(Company).filter(Company.active.is_(True)).order_by(Company.name).all()

    @staticmethod
    def search_by_name(db: Session, name: str) -> list[Company]:
        return (
            db.query(Company)
            .filter(Company.name.ilike(f"%{name}%"))
            .order_by(Company.name)
            .all()
        )

    @staticmethod
    def get_company_by_id(db: Session, company_id: str) -> Optional[Company]:
        return db.query(Company).filter(Company.id == company_id).first()

    @staticmethod
    def get_company_by_name(db: Session, name: str) -> Optional[Company]:
        return db.query(Company).filter(Company.name == name).first()

    @staticmethod
    def create_company(db: Session, **company_data) -> Company:
        company = Company(**company_data)
        db.add(company)
        db.commit()
        db.refresh(company)
        return company

    @staticmethod
    def update_company(db: Session, company: Company, **updates) -> Company:
        """Update a company with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(company, key):
                setattr(company, key, value)

        db.commit()
        db.refresh(company)
        return company

    @staticmethod
    def delete_company(db: Session, company: Company) -> None:
        db.delete(company)
        db.commit()
