"""Record types for the roster: employees and their shifts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


def _format_timestamp(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    return value


@dataclass
class Employee:
    """A member of staff."""

    id: Optional[int]
    name: str
    role: str
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None

    def __repr__(self) -> str:
        return f"<Employee(id={self.id}, name='{self.name}', role='{self.role}')>"

    def to_dict(self) -> dict:
        """Convert to a JSON-ready dictionary.

        ``created_at`` is left out when it is unknown, which is the case for
        the echo returned by an update.
        """
        data = {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "email": self.email,
            "phone": self.phone,
        }
        if self.created_at is not None:
            data["created_at"] = _format_timestamp(self.created_at)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Employee:
        """Create Employee from a stored row."""
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            role=data.get("role", ""),
            email=data.get("email"),
            phone=data.get("phone"),
            created_at=data.get("created_at"),
        )


@dataclass
class Shift:
    """A block of work on one date, optionally assigned to an employee.

    ``employee_id`` is a weak reference: nothing guarantees the employee
    still exists. ``employee_name`` is filled in by a lookup at read time
    and only appears in the output of reads that performed it.
    """

    id: Optional[int]
    date: str  # YYYY-MM-DD
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    position: str
    employee_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    employee_name: Optional[str] = None
    enriched: bool = field(default=False, repr=False, compare=False)

    def __repr__(self) -> str:
        return f"<Shift(id={self.id}, date={self.date}, {self.start_time}-{self.end_time}, emp={self.employee_id})>"

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "date": self.date,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "position": self.position,
            "employee_id": self.employee_id,
            "notes": self.notes,
        }
        if self.created_at is not None:
            data["created_at"] = _format_timestamp(self.created_at)
        if self.enriched:
            data["employee_name"] = self.employee_name
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Shift:
        """Create Shift from a stored row, with or without the joined name."""
        return cls(
            id=data.get("id"),
            date=data.get("date", ""),
            start_time=data.get("start_time", ""),
            end_time=data.get("end_time", ""),
            position=data.get("position", ""),
            employee_id=data.get("employee_id"),
            notes=data.get("notes"),
            created_at=data.get("created_at"),
            employee_name=data.get("employee_name"),
            enriched="employee_name" in data,
        )


@dataclass
class ShiftFilter:
    """Optional restriction for shift listings.

    When both fields are set, ``date`` wins and ``employee_id`` is ignored.
    ``unmatched`` marks a request whose employee reference cannot exist.
    """

    date: Optional[str] = None
    employee_id: Optional[int] = None
    unmatched: bool = False
