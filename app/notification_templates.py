"""
Plain-text notification content shared by the email and WhatsApp channels.

All builders take a BookingResponse snapshot, never an ORM instance, because
they run in background tasks after the request session is closed.
"""

from typing import Optional

from .domain.bookings.schemas import BookingResponse
from .domain.bookings.status import DEFAULT_PICKUP_OPTION, DEFAULT_STATUS


def booking_reference(booking: BookingResponse) -> str:
    return booking.trackingId or str(booking.id)


def technician_display_name(booking: BookingResponse) -> str:
    return booking.technicianName or booking.technician or ""


def optional_detail_rows(booking: BookingResponse) -> list[tuple[str, str]]:
    """Technician, live location and pickup rows, only for the values that are set"""
    rows = [
        ("Technician", technician_display_name(booking)),
        ("Technician Phone", booking.technicianPhone),
        ("Live Location", booking.mapUrl),
        ("Pickup Location", booking.pickupAddress),
        ("Pickup Phone", booking.pickupPhone),
        ("Pickup Map", booking.pickupMapUrl),
    ]
    return [(label, value) for label, value in rows if value]


def booking_summary_rows(booking: BookingResponse) -> list[tuple[str, str]]:
    rows = [
        ("Booking ID", booking_reference(booking) or "-"),
        ("Customer", booking.name or "-"),
        ("Phone", booking.phone or "-"),
        ("Email", booking.email or "-"),
        ("Device", f"{booking.brand or '-'} {booking.model or '-'}"),
        ("Issue", booking.service or "-"),
        ("Service Mode", booking.pickupOption or DEFAULT_PICKUP_OPTION),
        ("Address", booking.address or booking.location or "-"),
        ("Status", booking.status or DEFAULT_STATUS),
    ]
    return rows + optional_detail_rows(booking)


def booking_summary_text(booking: BookingResponse) -> str:
    return "\n".join(f"{label}: {value}" for label, value in booking_summary_rows(booking))


def created_subject(booking: BookingResponse, for_admin: bool = False) -> str:
    if for_admin:
        return f"New Repair Booking: {booking_reference(booking)}"
    return f"Booking Confirmed: {booking_reference(booking)}"


def created_message(booking: BookingResponse, for_admin: bool = False) -> str:
    heading = "New Booking Received" if for_admin else "Booking Confirmed"
    return f"{heading}\n{booking_summary_text(booking)}"


def status_message_line(status: Optional[str], booking: BookingResponse) -> str:
    """The customer-facing sentence that opens a status update"""
    normalized = (status or "").strip().lower()
    technician_name = technician_display_name(booking)

    if normalized == "pending":
        return "Your phone repair is pending."

    if normalized == "assigned":
        if technician_name:
            return f"Technician {technician_name} has been assigned for your pickup."
        return "A technician has been assigned for your pickup."

    if normalized == "pickup started":
        if technician_name:
            return (
                f"Technician {technician_name} is on the way "
                "and should reach you in about 2 minutes."
            )
        return "Your technician is on the way and should reach you in about 2 minutes."

    if normalized == "in service":
        return "Your device is now in service."

    if normalized == "in progress":
        return "Your phone repair status is In Progress."

    if normalized == "completed":
        return "Your phone repair is completed."

    if normalized == "cancelled":
        return "Your phone repair booking has been cancelled."

    return f"Your phone repair status is {status or 'updated'}."


def status_subject(status: Optional[str], booking: BookingResponse) -> str:
    normalized = (status or "").strip().lower()
    reference = booking_reference(booking)
    technician_name = technician_display_name(booking)

    if normalized == "completed":
        return f"Final Confirmation: Repair Completed ({reference})"

    if normalized == "assigned":
        if technician_name:
            return f"Technician Assigned: {technician_name} ({reference})"
        return f"Technician Assigned ({reference})"

    if normalized == "pickup started":
        return f"Technician On The Way: ETA 2 Min ({reference})"

    return f"Repair Status Update: {status or 'Updated'}"


def status_update_rows(booking: BookingResponse, previous_status: str = "") -> list[tuple[str, str]]:
    rows = [
        ("Booking ID", booking_reference(booking) or "-"),
        ("Device", f"{booking.brand or '-'} {booking.model or '-'}"),
        ("Issue", booking.service or "-"),
        ("Previous Status", previous_status or "-"),
        ("Current Status", booking.status or DEFAULT_STATUS),
    ]
    rows += optional_detail_rows(booking)
    if booking.adminNote.strip():
        rows.append(("Admin Update", booking.adminNote.strip()))
    return rows


def status_update_text(booking: BookingResponse, previous_status: str = "") -> str:
    lines = [status_message_line(booking.status or DEFAULT_STATUS, booking), ""]
    lines += [f"{label}: {value}" for label, value in status_update_rows(booking, previous_status)]
    return "\n".join(lines)
