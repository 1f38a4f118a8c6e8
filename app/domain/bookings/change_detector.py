"""
Decides whether a booking mutation warrants a customer notification.

Only customer-visible fields are compared, so re-saving identical data
or editing internal fields does not re-send the status message.
"""

from dataclasses import dataclass
from typing import Iterable

from ...shared.validators import clean_phone, clean_string
from .schemas import TECHNICIAN_FIELDS


@dataclass(frozen=True)
class BookingSnapshot:
    status: str = ""
    admin_note: str = ""
    service: str = ""
    technician_name: str = ""
    technician_phone: str = ""
    map_url: str = ""
    pickup_address: str = ""
    pickup_phone: str = ""

    @classmethod
    def from_booking(cls, booking) -> "BookingSnapshot":
        """Capture the fields of an ORM booking before or after a write"""
        return cls(
            status=clean_string(booking.status),
            admin_note=clean_string(booking.admin_note),
            service=clean_string(booking.service),
            technician_name=clean_string(booking.technician_name or booking.technician),
            technician_phone=clean_phone(booking.technician_phone),
            map_url=clean_string(booking.map_url),
            pickup_address=clean_string(booking.pickup_address),
            pickup_phone=clean_phone(booking.pickup_phone),
        )


def detect_changes(
    previous: BookingSnapshot, current: BookingSnapshot, provided: Iterable[str]
) -> list[str]:
    """
    List the customer-visible changes between two snapshots.

    Args:
        previous: Booking state before the write
        current: Booking state after the write
        provided: Request field names that were explicitly sent; the admin
            note and technician details only count when they were

    Returns:
        Names of the changed fields, empty when nothing needs announcing
    """
    provided = set(provided)
    technician_provided = bool(provided.intersection(TECHNICIAN_FIELDS))
    changes = []

    if previous.status.lower() != current.status.lower():
        changes.append("status")
    if "adminNote" in provided and previous.admin_note != current.admin_note:
        changes.append("adminNote")
    if previous.service != current.service:
        changes.append("service")
    if technician_provided and previous.technician_name != current.technician_name:
        changes.append("technicianName")
    if technician_provided and previous.technician_phone != current.technician_phone:
        changes.append("technicianPhone")
    if previous.map_url != current.map_url:
        changes.append("mapUrl")
    if previous.pickup_address != current.pickup_address:
        changes.append("pickupAddress")
    if previous.pickup_phone != current.pickup_phone:
        changes.append("pickupPhone")

    return changes


def should_notify(
    previous: BookingSnapshot, current: BookingSnapshot, provided: Iterable[str]
) -> bool:
    return bool(detect_changes(previous, current, provided))
