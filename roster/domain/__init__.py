"""Domain models and data access layer."""

from .db import Store
from .errors import NotFoundError, RosterError, StoreError, ValidationError
from .models import Employee, Shift, ShiftFilter
from .repositories import EmployeeRepository, ShiftRepository

__all__ = [
    "Store",
    "Employee",
    "Shift",
    "ShiftFilter",
    "EmployeeRepository",
    "ShiftRepository",
    "RosterError",
    "ValidationError",
    "NotFoundError",
    "StoreError",
]
