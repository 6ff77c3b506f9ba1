"""Location service - Business logic for company locations"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Company, Location
from ...shared.exceptions import NotFoundError
from .repository import LocationRepository
from .schemas import LocationCreate, LocationUpdate

logger = logging.getLogger(__name__)


class LocationService:
    """Service layer for location business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = LocationRepository()

    def get_locations(self, company_id: Optional[str] = None, active_only: bool = False) -> list[Location]:
        return self.repo.get_locations(self.db, company_id, active_only)

    def get_location(self, location_id: str, company_id: Optional[str] = None) -> Location:
        location = self.repo.get_location_by_id(self.db, location_id, company_id)
        if not location:
            raise NotFoundError("Location", location_id)
        return location

    def create_location(self, data: LocationCreate) -> Location:
        if not self.db.query(Company).filter(Company.id == data.companyId).first():
            raise NotFoundError("Company", data.companyId)

        location = self.repo.create_location(
            self.db,
            company_id=data.companyId,
            name=data.name,
            address=data.address,
            city=data.city,
            state=data.state,
            zip_code=data.zipCode,
            country=data.country,
            phone_number=data.phoneNumber,
            email=data.email,
            latitude=data.latitude,
            longitude=data.longitude,
            active=True,
        )
        logger.info(f"✅ Location created: {location.id} for company {location.company_id}")
        return location

    def update_location(
        self, location_id: str, data: LocationUpdate, company_id: Optional[str] = None
    ) -> Location:
        location = self.get_location(location_id, company_id)

        updates = {}
        if data.name is not None:
            updates["name"] = data.name
        if data.address is not None:
            updates["address"] = data.address
        if data.city is not None:
            updates["city"] = data.city
        if data.state is not None:
            updates["state"] = data.state
        if data.zipCode is not None:
            updates["zip_code"] = data.zipCode
        if data.country is not None:
            updates["country"] = data.country
        if data.phoneNumber is not None:
            updates["phone_number"] = data.phoneNumber
        if data.email is not None:
            updates["email"] = data.email
        if data.latitude is not None:
            updates["latitude"] = data.latitude
        if data.longitude is not None:
            updates["longitude"] = data.longitude
        if data.active is not None:
            updates["active"] = data.active

        return self.repo.update_location(self.db, location, **updates)

    def delete_location(self, location_id: str, company_id: Optional[str] = None) -> None:
        location = self.get_location(location_id, company_id)
        self.repo.delete_location(self.db, location)
        logger.info(f"🗑️ Location deleted: {location_id}")
