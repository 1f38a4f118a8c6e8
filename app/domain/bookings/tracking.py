"""Tracking ID generation for customer-facing booking lookups"""

import secrets
import string
import time

TRACKING_PREFIX = "BMR"
SUFFIX_LENGTH = 6
BASE36_ALPHABET = string.digits + string.ascii_uppercase


def to_base36(value: int) -> str:
    """Encode a non-negative integer in uppercase base36"""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_tracking_id() -> str:
    """
    Generate a tracking ID like BMR-LZ3K9Q1A-7GX2QD.

    The middle part is the creation time in epoch milliseconds and the
    suffix is random, so IDs are unlikely (not guaranteed) to collide;
    uniqueness is enforced by the database index.
    """
    timestamp = to_base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{TRACKING_PREFIX}-{timestamp}-{suffix}"
