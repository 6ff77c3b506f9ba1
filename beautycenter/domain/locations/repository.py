"""Location repository - Database operations for company locations"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Location


class LocationRepository:
    """Repository for location database operations"""

    @staticmethod
    def get_locations(db: Session, company_id: Optional[str] = None, active_only: bool = False) -> list[Location]:
        query = db.query(Location)
        if company_id:
            query = query.filter(Location.company_id == company_id)
        if active_only:
            query = query.filter(Location.active.is_(True))
        return query.order_by(Location.name).all()

    @staticmethod
    def get_location_by_id(db: Session, location_id: str, company_id: Optional[str] = None) -> Optional[Location]:
        query = db.query(Location).filter(Location.id == location_id)
        if company_id:
            query = query.filter(Location.company_id == company_id)
        return query.first()

    @staticmethod
    def create_location(db: Session, **location_data) -> Location:
        location = Location(**location_data)
        db.add(location)
        db.commit()
        db.refresh(location)
        return location

    @staticmethod
    def update_location(db: Session, location: Location, **updates) -> Location:
        for key, value in updates.items():
            if value is not None and hasattr(location, key):
                setattr(location, key, value)

        db.commit()
        db.refresh(location)
        return location

    @staticmethod
    def delete_location(db: Session, location: Location) -> None:
        db.delete(location)
        db.commit()
