"""Technician repository - Database operations for technicians"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Technician
from ..bookings.repository import BookingRepository


class TechnicianRepository:
    """Repository for technician database operations"""

    @staticmethod
    def list(db: Session, active_only: bool = True) -> list[Technician]:
        query = db.query(Technician)
        if active_only:
            query = query.filter(Technician.is_active.is_(True))
        return query.order_by(Technician.name.asc(), Technician.id.asc()).all()

    @staticmethod
    def get_by_id(db: Session, technician_id: int) -> Optional[Technician]:
        return db.query(Technician).filter(Technician.id == technician_id).first()

    @staticmethod
    def create(db: Session, **technician_data) -> Technician:
        technician = Technician(**technician_data)
        db.add(technician)
        db.commit()
        db.refresh(technician)
        return technician

    @staticmethod
    def update(db: Session, technician: Technician, **updates) -> Technician:
        """Update a technician with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(technician, key):
                setattr(technician, key, value)
        db.commit()
        db.refresh(technician)
        return technician

    @staticmethod
    def delete(db: Session, technician: Technician) -> int:
        """
        Delete a technician and clear its snapshot from assigned bookings.

        Returns the number of bookings that were unassigned.
        """
        cleared = BookingRepository.clear_technician(db, technician.id)
        db.delete(technician)
        db.commit()
        return cleared
