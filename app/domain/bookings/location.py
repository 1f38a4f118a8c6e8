"""
Derived location fields for bookings.

address/location are two views of one value, and the pickup address,
pickup phone and map links are derived from them unless a request
overrides them explicitly. resolve_location_fields() is pure: it only
computes the column updates, the service applies them.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional
from urllib.parse import quote

from ...shared.validators import clean_phone, clean_string
from .status import DEFAULT_PICKUP_OPTION, is_pickup_and_drop

GOOGLE_MAPS_URL = "https://www.google.com/maps"

# Same set of unescaped characters as JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class LocationState:
    """The stored fields the resolver reads from an existing booking"""

    address: str = ""
    location: str = ""
    phone: str = ""
    pickup_option: str = DEFAULT_PICKUP_OPTION
    pickup_address: str = ""
    pickup_phone: str = ""

    @classmethod
    def from_booking(cls, booking) -> "LocationState":
        return cls(
            address=booking.address or "",
            location=booking.location or "",
            phone=booking.phone or "",
            pickup_option=booking.pickup_option or DEFAULT_PICKUP_OPTION,
            pickup_address=booking.pickup_address or "",
            pickup_phone=booking.pickup_phone or "",
        )


def _is_finite(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def format_coordinate(value: float) -> str:
    """Render a coordinate the way a JavaScript client would (77.0 -> '77')"""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def build_coordinate_map_url(lat: Optional[float], lng: Optional[float]) -> str:
    if not _is_finite(lat) or not _is_finite(lng):
        return ""
    return f"{GOOGLE_MAPS_URL}?q={format_coordinate(lat)},{format_coordinate(lng)}"


def build_address_map_url(address: Any) -> str:
    value = clean_string(address)
    if not value:
        return ""
    return f"{GOOGLE_MAPS_URL}/search/?api=1&query={quote(value, safe=_URI_COMPONENT_SAFE)}"


def resolve_location_fields(
    existing: Optional[LocationState],
    fields: Mapping[str, Any],
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """
    Compute derived column updates from request fields and the prior state.

    Args:
        existing: State of the stored booking, or None when creating
        fields: Normalized request fields keyed by their JSON names; only
            keys present in the request may appear
        now: Timestamp for a live location update

    Returns:
        Column name -> value for every field that must be written
    """
    creating = existing is None
    base = existing or LocationState()
    updates: dict[str, Any] = {}

    # 1-2. Address, with location back-filled from whichever one was sent
    address_in = clean_string(fields.get("address"))
    location_in = clean_string(fields.get("location"))
    address_supplied = "address" in fields or "location" in fields

    if address_in:
        address = address_in
        location = location_in or address_in
    elif location_in:
        address = location_in
        location = location_in
    else:
        address = base.address
        location = base.location or base.address

    if creating or address_in or location_in:
        updates["address"] = address
        updates["location"] = location

    # 3. Pickup option
    option_in = clean_string(fields.get("pickupOption"))
    option_supplied = "pickupOption" in fields
    pickup_option = option_in or base.pickup_option or DEFAULT_PICKUP_OPTION
    if creating or option_in:
        updates["pickup_option"] = pickup_option
    pickup_and_drop = is_pickup_and_drop(pickup_option)

    # 4-5. Pickup address and its map link
    pickup_address_in = clean_string(fields.get("pickupAddress"))
    if "pickupAddress" in fields and (pickup_address_in or not creating):
        pickup_address: Optional[str] = pickup_address_in
    elif creating or option_supplied or address_supplied:
        pickup_address = address if pickup_and_drop else ""
    else:
        pickup_address = None

    if pickup_address is not None:
        updates["pickup_address"] = pickup_address
        updates["pickup_map_url"] = build_address_map_url(pickup_address)

    # 6. Pickup phone, following the booking phone
    phone = clean_phone(fields.get("phone")) or base.phone
    phone_supplied = "phone" in fields
    pickup_phone_in = clean_phone(fields.get("pickupPhone"))
    if "pickupPhone" in fields and (pickup_phone_in or not creating):
        pickup_phone: Optional[str] = pickup_phone_in
    elif creating or option_supplied or address_supplied or phone_supplied:
        pickup_phone = phone if pickup_and_drop else ""
    else:
        pickup_phone = None

    if pickup_phone is not None:
        updates["pickup_phone"] = pickup_phone

    # 7. Live location
    lat, lng = fields.get("lat"), fields.get("lng")
    if _is_finite(lat) and _is_finite(lng):
        updates["live_lat"] = float(lat)
        updates["live_lng"] = float(lng)
        updates["live_updated_at"] = now or datetime.now(timezone.utc).replace(tzinfo=None)
        if not clean_string(fields.get("mapUrl")):
            updates["map_url"] = build_coordinate_map_url(lat, lng)

    return updates
