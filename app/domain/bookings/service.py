"""Booking service - Business logic for the repair booking lifecycle"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Booking
from ...shared.exceptions import NotFoundError, ValidationError
from ..technicians.service import TechnicianService
from .change_detector import BookingSnapshot, detect_changes
from .location import LocationState, resolve_location_fields
from .repository import BookingRepository
from .schemas import (
    AssignTechnicianRequest,
    BookingCreate,
    BookingUpdate,
    LiveLocationUpdateRequest,
    StatusUpdateRequest,
    TrackBookingRequest,
)
from .status import ASSIGNED, DEFAULT_STATUS, validate_status

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "brand, model, service, name, phone, email and address are required"

# Request field -> column for values copied as-is by the general update
DIRECT_UPDATE_COLUMNS = {
    "name": "name",
    "phone": "phone",
    "email": "email",
    "service": "service",
    "status": "status",
    "brand": "brand",
    "model": "model",
    "issueOne": "issue_one",
    "issueTwo": "issue_two",
    "adminNote": "admin_note",
    "mapUrl": "map_url",
    "technicianPhone": "technician_phone",
    "selectedIssues": "selected_issues",
}

REQUIRED_UPDATE_FIELDS = ("brand", "model", "service", "name", "phone", "email")

# Fields the location resolver reads; anything else stays out of its input
LOCATION_INPUT_FIELDS = (
    "address",
    "location",
    "pickupOption",
    "pickupAddress",
    "pickupPhone",
    "phone",
    "mapUrl",
)


@dataclass
class BookingMutation:
    """Outcome of a write: the saved booking and what the customer should hear about"""

    booking: Booking
    previous_status: str
    changes: list[str] = field(default_factory=list)

    @property
    def should_notify(self) -> bool:
        return bool(self.changes)


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()

    # ========================================================================
    # READS
    # ========================================================================

    def get_booking(self, booking_id: int) -> Booking:
        booking = self.repo.get_by_id(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    def list_bookings(self, status: Optional[str] = None) -> list[Booking]:
        return self.repo.list(self.db, status)

    def track_booking(self, data: TrackBookingRequest) -> Booking:
        """Public lookup: the phone number acts as the secret for a tracking ID"""
        if not data.trackingId or not data.phone:
            raise ValidationError("trackingId and phone are required")

        booking = self.repo.find_by_tracking(self.db, data.trackingId.upper(), data.phone)
        if not booking:
            raise NotFoundError("Booking not found for this tracking ID and phone")
        return booking

    # ========================================================================
    # WRITES
    # ========================================================================

    def create_booking(self, data: BookingCreate) -> Booking:
        """Validate intake, derive location fields and persist under a new tracking ID"""
        lat, lng = data.coordinates(nested_first=True)
        location_fields = resolve_location_fields(
            None,
            {
                "address": data.address,
                "location": data.location,
                "pickupOption": data.pickupOption,
                "pickupAddress": data.pickupAddress,
                "pickupPhone": data.pickupPhone,
                "phone": data.phone,
                "mapUrl": data.mapUrl,
                "lat": lat,
                "lng": lng,
            },
        )

        required = (data.brand, data.model, data.service, data.name, data.phone, data.email)
        if not all(required) or not location_fields.get("address"):
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)

        status = validate_status(data.status or DEFAULT_STATUS)

        booking_data = {
            "brand": data.brand,
            "model": data.model,
            "service": data.service,
            "selected_issues": data.selectedIssues,
            "issue_one": data.issueOne,
            "issue_two": data.issueTwo,
            "name": data.name,
            "phone": data.phone,
            "email": data.email,
            "status": status,
            "technician": data.technician or data.technicianName,
            "technician_name": data.technicianName or data.technician,
            "technician_phone": data.technicianPhone,
            "admin_note": data.adminNote,
            "map_url": data.mapUrl,
        }
        booking_data.update(location_fields)

        booking = self.repo.create(self.db, **booking_data)
        logger.info(f"Booking {booking.id} created with tracking ID {booking.tracking_id}")
        return booking

    def update_booking(self, booking_id: int, data: BookingUpdate) -> BookingMutation:
        """Partial update; only fields present in the request are written"""
        booking = self.get_booking(booking_id)
        provided = data.provided()
        previous = BookingSnapshot.from_booking(booking)
        previous_status = booking.status or DEFAULT_STATUS

        for name in REQUIRED_UPDATE_FIELDS:
            if name in provided and not getattr(data, name):
                raise ValidationError(f"{name} cannot be empty")
        if ({"address", "location"} & provided) and not (data.address or data.location):
            raise ValidationError("address cannot be empty")
        if "status" in provided:
            validate_status(data.status)

        updates = {
            column: getattr(data, name)
            for name, column in DIRECT_UPDATE_COLUMNS.items()
            if name in provided
        }

        if {"technician", "technicianName"} & provided:
            technician_name = data.technicianName or data.technician or ""
            updates["technician_name"] = technician_name
            updates["technician"] = technician_name

        if "technicianId" in provided:
            if data.technicianId is None:
                updates["technician_id"] = None
            else:
                technician = TechnicianService(self.db).resolve_reference(data.technicianId)
                updates["technician_id"] = technician.id
                if not {"technician", "technicianName"} & provided:
                    updates["technician_name"] = technician.name
                    updates["technician"] = technician.name
                if "technicianPhone" not in provided:
                    updates["technician_phone"] = technician.phone

        location_input = {name: getattr(data, name) for name in LOCATION_INPUT_FIELDS if name in provided}
        location_input["lat"], location_input["lng"] = data.coordinates(nested_first=True)
        updates.update(resolve_location_fields(LocationState.from_booking(booking), location_input))

        booking = self.repo.save(self.db, booking, **updates)
        changes = detect_changes(previous, BookingSnapshot.from_booking(booking), provided)
        logger.info(f"Booking {booking.id} updated ({', '.join(sorted(updates)) or 'no fields'})")
        return BookingMutation(booking, previous_status, changes)

    def assign_technician(self, booking_id: int, data: AssignTechnicianRequest) -> BookingMutation:
        """Assign a registered technician by id, or a manually named one"""
        booking = self.get_booking(booking_id)
        previous = BookingSnapshot.from_booking(booking)
        previous_status = booking.status or DEFAULT_STATUS

        technician_id = None
        technician_name = data.technicianName or data.technician
        technician_phone = data.technicianPhone

        if data.technicianId:
            technician = TechnicianService(self.db).resolve_reference(data.technicianId)
            technician_id = technician.id
            technician_name = technician.name
            technician_phone = technician.phone

        if not technician_name:
            raise ValidationError("technicianId or technicianName is required")

        status = validate_status(data.status or ASSIGNED)

        booking = self.repo.save(
            self.db,
            booking,
            technician_id=technician_id,
            technician_name=technician_name,
            technician=technician_name,
            technician_phone=technician_phone,
            status=status,
        )
        changes = detect_changes(
            previous,
            BookingSnapshot.from_booking(booking),
            {"technicianId", "technicianName", "technicianPhone", "status"},
        )
        logger.info(f"Technician '{technician_name}' assigned to booking {booking.id}")
        return BookingMutation(booking, previous_status, changes)

    def update_status(self, booking_id: int, data: StatusUpdateRequest) -> BookingMutation:
        booking = self.get_booking(booking_id)

        if not data.status:
            raise ValidationError("status is required")
        validate_status(data.status)

        previous = BookingSnapshot.from_booking(booking)
        previous_status = booking.status or DEFAULT_STATUS

        updates = {"status": data.status}
        provided = {"status"}
        if data.adminNote is not None:
            updates["admin_note"] = data.adminNote
            provided.add("adminNote")

        booking = self.repo.save(self.db, booking, **updates)
        changes = detect_changes(previous, BookingSnapshot.from_booking(booking), provided)
        logger.info(f"Booking {booking.id} status: {previous_status} -> {booking.status}")
        return BookingMutation(booking, previous_status, changes)

    def update_live_location(
        self, booking_id: int, data: LiveLocationUpdateRequest, now: Optional[datetime] = None
    ) -> BookingMutation:
        """Record the technician position; mapUrl always follows the new coordinates"""
        booking = self.get_booking(booking_id)

        lat, lng = data.coordinates(nested_first=False)
        if lat is None or lng is None:
            raise ValidationError("lat and lng are required numbers")
        if data.status:
            validate_status(data.status)

        previous = BookingSnapshot.from_booking(booking)
        previous_status = booking.status or DEFAULT_STATUS

        updates = resolve_location_fields(
            LocationState.from_booking(booking), {"lat": lat, "lng": lng}, now=now
        )
        provided = {"lat", "lng"}
        if data.status:
            updates["status"] = data.status
            provided.add("status")
        if data.adminNote is not None:
            updates["admin_note"] = data.adminNote
            provided.add("adminNote")

        booking = self.repo.save(self.db, booking, **updates)
        changes = detect_changes(previous, BookingSnapshot.from_booking(booking), provided)
        return BookingMutation(booking, previous_status, changes)

    def delete_booking(self, booking_id: int) -> dict:
        booking = self.get_booking(booking_id)
        self.repo.delete(self.db, booking)
        logger.info(f"Booking {booking_id} deleted")
        return {"ok": True}
