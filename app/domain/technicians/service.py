"""Technician service - Business logic for the technician registry"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Technician
from ...shared.exceptions import NotFoundError, ValidationError
from .repository import TechnicianRepository
from .schemas import TechnicianCreate, TechnicianUpdate

logger = logging.getLogger(__name__)


class TechnicianService:
    """Service layer for technician business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TechnicianRepository()

    def list_technicians(self, active_only: bool = True) -> list[Technician]:
        return self.repo.list(self.db, active_only)

    def get_technician(self, technician_id: int) -> Technician:
        technician = self.repo.get_by_id(self.db, technician_id)
        if not technician:
            raise NotFoundError("Technician not found")
        return technician

    def resolve_reference(self, technician_id: Optional[str]) -> Technician:
        """
        Look up a technician from a request reference.

        Booking payloads carry the id as a string; anything that is not a
        positive integer cannot exist and is reported as not found.
        """
        if not technician_id or not technician_id.isdigit():
            raise NotFoundError("Technician not found")
        return self.get_technician(int(technician_id))

    def create_technician(self, data: TechnicianCreate) -> Technician:
        if not data.name or not data.phone:
            raise ValidationError("name and phone are required")

        technician = self.repo.create(
            self.db,
            name=data.name,
            phone=data.phone,
            email=data.email,
            is_active=data.isActive,
        )
        logger.info(f"Technician {technician.id} created: {technician.name}")
        return technician

    def update_technician(self, technician_id: int, data: TechnicianUpdate) -> Technician:
        technician = self.get_technician(technician_id)

        if "name" in data.model_fields_set and data.name == "":
            raise ValidationError("name cannot be empty")
        if "phone" in data.model_fields_set and data.phone == "":
            raise ValidationError("phone cannot be empty")

        updates = {
            "name": data.name,
            "phone": data.phone,
            "email": data.email,
            "is_active": data.isActive,
        }
        return self.repo.update(self.db, technician, **updates)

    def delete_technician(self, technician_id: int) -> dict:
        technician = self.get_technician(technician_id)
        cleared = self.repo.delete(self.db, technician)
        logger.info(f"Technician {technician_id} deleted, unassigned from {cleared} booking(s)")
        return {"ok": True}
