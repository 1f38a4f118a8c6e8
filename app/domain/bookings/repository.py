"""Booking repository - Database operations for bookings"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...config import TRACKING_ID_MAX_ATTEMPTS
from ...models import Booking
from ...shared.exceptions import ConflictError
from .tracking import generate_tracking_id

logger = logging.getLogger(__name__)


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def create(db: Session, max_attempts: int = TRACKING_ID_MAX_ATTEMPTS, **booking_data) -> Booking:
        """
        Insert a booking under a fresh tracking ID.

        A clash on the unique tracking_id index is retried with a new ID;
        after max_attempts the insert is abandoned with ConflictError.
        """
        for attempt in range(1, max_attempts + 1):
            booking = Booking(tracking_id=generate_tracking_id(), **booking_data)
            db.add(booking)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                logger.warning(
                    f"Tracking ID collision on attempt {attempt}/{max_attempts}: {e.orig}"
                )
                continue
            db.refresh(booking)
            return booking

        raise ConflictError("Could not generate a unique tracking ID, please retry")

    @staticmethod
    def get_by_id(db: Session, booking_id: int) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def list(db: Session, status: Optional[str] = None) -> list[Booking]:
        """All bookings, newest first, optionally filtered by exact status"""
        query = db.query(Booking)
        if status:
            query = query.filter(Booking.status == status)
        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    @staticmethod
    def find_by_tracking(db: Session, tracking_id: str, phone: str) -> Optional[Booking]:
        """Match on tracking ID, or on the internal id when the input is all digits"""
        criteria = Booking.tracking_id == tracking_id
        if tracking_id.isdigit():
            criteria = criteria | (Booking.id == int(tracking_id))
        return db.query(Booking).filter(criteria, Booking.phone == phone).first()

    @staticmethod
    def save(db: Session, booking: Booking, **updates) -> Booking:
        """Apply column updates (None is a real value here) and commit"""
        for key, value in updates.items():
            setattr(booking, key, value)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def delete(db: Session, booking: Booking) -> None:
        db.delete(booking)
        db.commit()

    @staticmethod
    def clear_technician(db: Session, technician_id: int) -> int:
        """Drop the technician reference and snapshot from every booking that holds it"""
        cleared = (
            db.query(Booking)
            .filter(Booking.technician_id == technician_id)
            .update(
                {
                    Booking.technician_id: None,
                    Booking.technician: "",
                    Booking.technician_name: "",
                    Booking.technician_phone: "",
                },
                synchronize_session=False,
            )
        )
        return cleared
