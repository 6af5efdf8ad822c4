from __future__ import annotations

import math
from typing import Any, Optional

from ..core.constants import MAX_NOTE_LENGTH, MAX_PAGE_SIZE
from ..core.exceptions import InvalidInputError


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{field_name} is required")
    return value.strip()


def optional_text(value: Any, field_name: str, *, max_length: int = MAX_NOTE_LENGTH) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInputError(f"{field_name} must be text")
    value = value.strip()
    if not value:
        return None
    if len(value) > max_length:
        raise InvalidInputError(f"{field_name} must be at most {max_length} characters")
    return value


def optional_note(value: Any, field_name: str = "note", *, max_length: int = MAX_NOTE_LENGTH) -> Optional[str]:
    """Free-text note, stored exactly as given. Only ``""`` collapses to None."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidInputError(f"{field_name} must be text")
    if len(value) > max_length:
        raise InvalidInputError(f"{field_name} must be at most {max_length} characters")
    return value


def require_number(value: Any, field_name: str) -> float:
    # bool is an int subclass; "true" is never a coordinate
    if isinstance(value, bool):
        raise InvalidInputError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field_name} must be a number")
    if not math.isfinite(number):
        raise InvalidInputError(f"{field_name} must be a finite number")
    return number


def require_latitude(value: Any) -> float:
    lat = require_number(value, "latitude")
    if not -90 <= lat <= 90:
        raise InvalidInputError("latitude must be between -90 and 90")
    return lat


def require_longitude(value: Any) -> float:
    lng = require_number(value, "longitude")
    if not -180 <= lng <= 180:
        raise InvalidInputError("longitude must be between -180 and 180")
    return lng


def require_positive(value: Any, field_name: str) -> float:
    number = require_number(value, field_name)
    if number <= 0:
        raise InvalidInputError(f"{field_name} must be greater than 0")
    return number


def require_page(page: Any, page_size: Any) -> tuple[int, int]:
    try:
        page = int(page)
        page_size = int(page_size)
    except (TypeError, ValueError):
        raise InvalidInputError("page and limit must be integers")
    if page < 1:
        raise InvalidInputError("page must be at least 1")
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise InvalidInputError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
    return page, page_size
