"""Repository classes for employee and shift data access."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import sqlalchemy as sa

from .db import Store, employees, fits_integer_column, shifts
from .errors import NotFoundError, ValidationError
from .models import Employee, Shift, ShiftFilter
from .validation import EMPLOYEE_REQUIRED, SHIFT_REQUIRED, require_fields

logger = logging.getLogger(__name__)


def _require_rows(records: List[Dict[str, Any]], required: Iterable[str]) -> None:
    """Check every record before anything is written; errors name the 1-based row."""
    for number, values in enumerate(records, start=1):
        try:
            require_fields(values, required)
        except ValidationError as e:
            raise ValidationError(f"Row {number}: {e.message}") from e


class EmployeeRepository:
    """Repository for employee data access."""

    @staticmethod
    def get_all(store: Store) -> List[Employee]:
        """Get all employees, ordered by name."""
        rows = store.list_all(employees, employees.c.name, employees.c.id)
        return [Employee.from_dict(row) for row in rows]

    @staticmethod
    def get_by_id(store: Store, employee_id: int) -> Employee:
        """Get employee by ID."""
        row = store.get(employees, employee_id)
        if row is None:
            raise NotFoundError("Employee not found")
        return Employee.from_dict(row)

    @staticmethod
    def create(
        store: Store,
        name: str,
        role: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Employee:
        """Create a new employee. Name and role are required."""
        values = {"name": name, "role": role, "email": email, "phone": phone}
        require_fields(values, EMPLOYEE_REQUIRED)
        row = store.insert(employees, values)
        logger.info("Created employee %s (%s)", row["id"], name)
        return Employee.from_dict(row)

    @staticmethod
    def bulk_create(store: Store, records: List[Dict[str, Any]]) -> List[Employee]:
        """Create several employees in one transaction. Nothing is stored if any row is invalid."""
        _require_rows(records, EMPLOYEE_REQUIRED)
        rows = store.insert_many(employees, records)
        logger.info("Created %d employees", len(rows))
        return [Employee.from_dict(row) for row in rows]

    @staticmethod
    def update(
        store: Store,
        employee_id: int,
        name: str,
        role: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Employee:
        """
        Replace the mutable fields of an employee.

        The result echoes the inputs; the row is not read back.
        """
        values = {"name": name, "role": role, "email": email, "phone": phone}
        if store.update(employees, employee_id, values) == 0:
            raise NotFoundError("Employee not found")
        logger.info("Updated employee %s", employee_id)
        return Employee(id=employee_id, **values)

    @staticmethod
    def delete(store: Store, employee_id: int) -> int:
        """Delete an employee. Shifts that reference them are left as they are."""
        if store.delete(employees, employee_id) == 0:
            raise NotFoundError("Employee not found")
        logger.info("Deleted employee %s", employee_id)
        return employee_id


class ShiftRepository:
    """Repository for shift data access."""

    @staticmethod
    def _select_with_employee_name() -> sa.Select:
        # Outer join so unassigned shifts and dangling references still show up.
        return sa.select(shifts, employees.c.name.label("employee_name")).select_from(
            shifts.outerjoin(employees, shifts.c.employee_id == employees.c.id)
        )

    @staticmethod
    def _filter_clause(shift_filter: Optional[ShiftFilter]):
        if shift_filter is None:
            return None
        if shift_filter.date:
            return shifts.c.date == shift_filter.date
        if shift_filter.unmatched:
            return sa.false()
        if shift_filter.employee_id is not None:
            if not fits_integer_column(shift_filter.employee_id):
                return sa.false()
            return shifts.c.employee_id == shift_filter.employee_id
        return None

    @staticmethod
    def get_all(store: Store, shift_filter: Optional[ShiftFilter] = None) -> List[Shift]:
        """
        Get shifts with the assigned employee's name, ordered by date then start time.

        A filter restricts to one date or, when it has no date, to one employee.
        """
        stmt = ShiftRepository._select_with_employee_name()
        clause = ShiftRepository._filter_clause(shift_filter)
        if clause is not None:
            stmt = stmt.where(clause)
        stmt = stmt.order_by(shifts.c.date, shifts.c.start_time, shifts.c.id)
        return [Shift.from_dict(row) for row in store.fetch_all(stmt)]

    @staticmethod
    def get_by_id(store: Store, shift_id: int) -> Shift:
        """Get shift by ID, with the assigned employee's name."""
        if not fits_integer_column(shift_id):
            raise NotFoundError("Shift not found")
        stmt = ShiftRepository._select_with_employee_name().where(shifts.c.id == shift_id)
        row = store.fetch_one(stmt)
        if row is None:
            raise NotFoundError("Shift not found")
        return Shift.from_dict(row)

    @staticmethod
    def create(
        store: Store,
        date: str,
        start_time: str,
        end_time: str,
        position: str,
        employee_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Shift:
        """
        Create a new shift.

        ``employee_id`` is stored as given; it is not checked against the
        employees table.
        """
        values = {
            "date": date,
            "start_time": start_time,
            "end_time": end_time,
            "position": position,
            "employee_id": employee_id,
            "notes": notes,
        }
        require_fields(values, SHIFT_REQUIRED)
        row = store.insert(shifts, values)
        logger.info("Created shift %s on %s", row["id"], date)
        return Shift.from_dict(row)

    @staticmethod
    def bulk_create(store: Store, records: List[Dict[str, Any]]) -> List[Shift]:
        """Create several shifts in one transaction. Nothing is stored if any row is invalid."""
        _require_rows(records, SHIFT_REQUIRED)
        rows = store.insert_many(shifts, records)
        logger.info("Created %d shifts", len(rows))
        return [Shift.from_dict(row) for row in rows]

    @staticmethod
    def update(
        store: Store,
        shift_id: int,
        date: str,
        start_time: str,
        end_time: str,
        position: str,
        employee_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Shift:
        """Replace the mutable fields of a shift. Required fields are not re-checked."""
        values = {
            "date": date,
            "start_time": start_time,
            "end_time": end_time,
            "position": position,
            "employee_id": employee_id,
            "notes": notes,
        }
        if store.update(shifts, shift_id, values) == 0:
            raise NotFoundError("Shift not found")
        logger.info("Updated shift %s", shift_id)
        return Shift(id=shift_id, **values)

    @staticmethod
    def delete(store: Store, shift_id: int) -> int:
        """Delete a shift."""
        if store.delete(shifts, shift_id) == 0:
            raise NotFoundError("Shift not found")
        logger.info("Deleted shift %s", shift_id)
        return shift_id
