"""Shared normalization utilities for raw request input.

None of these raise: absent or unusable input becomes "" (strings) or None
(numbers), leaving required-field checks to the booking service.
"""

import math
import re
from typing import Any, Optional

PLACEHOLDER_MARKERS = ("replace_with", "your_new_16_char", "app_password_here", "example")


def clean_string(value: Any) -> str:
    """Strip a string value; anything that is not a string becomes ''"""
    if not isinstance(value, str):
        return ""
    return value.strip()


def clean_email(value: Any) -> str:
    return clean_string(value).lower()


def clean_phone(value: Any) -> str:
    """
    Coerce a phone-like value to a trimmed string.

    Numbers are accepted because some clients post phone numbers as JSON
    numbers; 9999999999.0 renders as '9999999999'.
    """
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, float):
        if not math.isfinite(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (int, str)):
        return str(value).strip()
    return ""


def to_number_or_null(value: Any) -> Optional[float]:
    """Parse a finite number from numbers or numeric strings; None otherwise"""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    elif not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except (OverflowError, ValueError):
        return None
    return number if math.isfinite(number) else None


def clean_string_list(value: Any) -> list[str]:
    """Trim each entry of a list and drop the empty ones"""
    if not isinstance(value, list):
        return []
    cleaned = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            continue
        text = clean_phone(item) if not isinstance(item, str) else item.strip()
        if text:
            cleaned.append(text)
    return cleaned


def is_placeholder_value(value: Optional[str]) -> bool:
    """
    Check whether a credential is unset or still a template placeholder.

    Examples:
        >>> is_placeholder_value("replace_with_app_password")
        True
        >>> is_placeholder_value("abcd efgh ijkl mnop")
        False
    """
    normalized = (value or "").strip().lower()
    if not normalized:
        return True
    return any(marker in normalized for marker in PLACEHOLDER_MARKERS)


def normalize_whatsapp_phone(value: Any, default_country_code: str = "+91") -> str:
    """
    Normalize a phone number for WhatsApp delivery (E.164-like).

    Keeps digits and '+', and prefixes the default country code when the
    number was entered without one.
    """
    raw = clean_phone(value)
    if not raw:
        return ""

    cleaned = re.sub(r"[^\d+]", "", raw)
    if not cleaned:
        return ""

    if cleaned.startswith("+"):
        return cleaned

    return f"{default_country_code}{cleaned}"
