"""
Input validation and normalization.

Trims fields, drops control characters, collapses repeated whitespace, rejects
over-long fields and checks coordinates. Category is free text: the UI offers a short
list of labels but anything non-empty is accepted.
"""

from __future__ import annotations
import re
from typing import Any, Dict, Tuple

MAX_ADDRESS_LEN = 300
MAX_CATEGORY_LEN = 50

REQUIRED_FIELDS_MESSAGE = "Address and category are required"
ADDRESS_TOO_LONG_MESSAGE = f"Address must be at most {MAX_ADDRESS_LEN} characters"
CATEGORY_TOO_LONG_MESSAGE = f"Category must be at most {MAX_CATEGORY_LEN} characters"

_CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F]")
_MULTI_SPACE = re.compile(r"\s{2,}")


def normalize_text(value: Any, max_len: int | None = None) -> str:
    """
    Normalize a free-text field:
    - non-strings count as missing
    - strip, and bound length when max_len is given
    - drop control chars (newlines included)
    - collapse double spaces
    """
    if not isinstance(value, str):
        return ""
    t = value.strip()
    if not t:
        return ""
    t = _CONTROL_CHARS.sub(" ", t)
    t = _MULTI_SPACE.sub(" ", t).strip()
    if max_len is None:
        return t
    return t[:max_len].rstrip()


def validate_address_payload(data: Any) -> Tuple[Dict[str, str], str | None]:
    """
    Validates a save request body and returns (payload, error_message).
    On success, payload has `address` and `category`, both non-empty.
    Over-long fields are rejected, not cut.
    """
    if not isinstance(data, dict):
        return {}, REQUIRED_FIELDS_MESSAGE

    address = normalize_text(data.get("address"))
    category = normalize_text(data.get("category"))

    if not address or not category:
        return {}, REQUIRED_FIELDS_MESSAGE
    if len(address) > MAX_ADDRESS_LEN:
        return {}, ADDRESS_TOO_LONG_MESSAGE
    if len(category) > MAX_CATEGORY_LEN:
        return {}, CATEGORY_TOO_LONG_MESSAGE

    return {"address": address, "category": category}, None


def parse_coordinates(lat: Any, lng: Any) -> Tuple[float, float] | None:
    """Return (lat, lng) as floats when both parse and are in range, else None."""
    try:
        lat_f = float(lat)
        lng_f = float(lng)
    except (TypeError, ValueError):
        return None
    if lat_f != lat_f or lng_f != lng_f:  # NaN
        return None
    if not (-90.0 <= lat_f <= 90.0 and -180.0 <= lng_f <= 180.0):
        return None
    return lat_f, lng_f
