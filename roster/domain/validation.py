"""Request decoding and required-field checks.

Everything here is pure: it turns request-shaped input into the plain
arguments the repositories take, or raises ValidationError. No store access
happens until these checks pass.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Optional

from .db import fits_integer_column
from .errors import NotFoundError, ValidationError
from .models import ShiftFilter

EMPLOYEE_FIELDS = ("name", "role", "email", "phone")
EMPLOYEE_REQUIRED = ("name", "role")

SHIFT_FIELDS = ("date", "start_time", "end_time", "position", "employee_id", "notes")
SHIFT_REQUIRED = ("date", "start_time", "end_time", "position")

_INTEGER = re.compile(r"-?[0-9]+")


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def require_fields(values: Dict[str, Any], required: Iterable[str]) -> None:
    """Raise ValidationError naming every required field that is absent or empty."""
    missing = [name for name in required if _is_blank(values.get(name))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def ensure_object(payload: Any) -> Dict[str, Any]:
    """An absent body decodes to an empty object; anything but an object is rejected."""
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _parse_integer(value: Any) -> Optional[int]:
    """Return ``value`` as an int that fits an INTEGER column, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not _INTEGER.fullmatch(text):
            return None
        value = int(text)
    elif not isinstance(value, int):
        return None
    return value if fits_integer_column(value) else None


def coerce_employee_id(value: Any) -> Optional[int]:
    """Decode an optional employee reference from JSON or a CSV cell."""
    if _is_blank(value):
        return None
    employee_id = _parse_integer(value)
    if employee_id is None:
        raise ValidationError("employee_id must be an integer")
    return employee_id


def parse_record_id(value: Any, not_found: str) -> int:
    """Decode an ``{id}`` path segment. Anything that cannot be a stored id is not found."""
    record_id = _parse_integer(value)
    if record_id is None:
        raise NotFoundError(not_found)
    return record_id


def employee_fields(payload: Any) -> Dict[str, Any]:
    """Pick the employee fields out of a request body. Other keys are ignored."""
    data = ensure_object(payload)
    return {name: data.get(name) for name in EMPLOYEE_FIELDS}


def shift_fields(payload: Any) -> Dict[str, Any]:
    """Pick the shift fields out of a request body, decoding ``employee_id``."""
    data = ensure_object(payload)
    values = {name: data.get(name) for name in SHIFT_FIELDS}
    values["employee_id"] = coerce_employee_id(values["employee_id"])
    return values


def parse_shift_filter(date: Optional[str] = None, employee_id: Any = None) -> ShiftFilter:
    """Build a listing filter from query parameters.

    A non-empty ``date`` takes precedence; ``employee_id`` is then dropped
    without being decoded. An ``employee_id`` that is not an integer cannot
    match any stored shift, so it yields a filter that matches nothing.
    """
    if not _is_blank(date):
        return ShiftFilter(date=date)
    if _is_blank(employee_id):
        return ShiftFilter()
    parsed = _parse_integer(employee_id)
    if parsed is None:
        return ShiftFilter(unmatched=True)
    return ShiftFilter(employee_id=parsed)
