"""
Booking status vocabulary.

Expected progression: Pending → Assigned → Pickup Started → In Service →
In Progress → Completed, with Cancelled reachable at any point. Only
membership is enforced; any status may follow any other.
"""

from typing import Optional

from ...shared.exceptions import ValidationError

PENDING = "Pending"
ASSIGNED = "Assigned"
PICKUP_STARTED = "Pickup Started"
IN_SERVICE = "In Service"
IN_PROGRESS = "In Progress"
COMPLETED = "Completed"
CANCELLED = "Cancelled"

STATUS_VALUES = (
    PENDING,
    ASSIGNED,
    PICKUP_STARTED,
    IN_SERVICE,
    IN_PROGRESS,
    COMPLETED,
    CANCELLED,
)

DEFAULT_STATUS = PENDING
DEFAULT_PICKUP_OPTION = "Pickup & Drop"


def is_valid_status(status: Optional[str]) -> bool:
    return status in STATUS_VALUES


def validate_status(status: Optional[str]) -> str:
    """Return the status unchanged, or raise ValidationError if it is not in the vocabulary"""
    if not is_valid_status(status):
        raise ValidationError(f"status must be one of: {', '.join(STATUS_VALUES)}")
    return status


def is_pickup_and_drop(pickup_option: Optional[str]) -> bool:
    return (pickup_option or "").strip().lower() == DEFAULT_PICKUP_OPTION.lower()
