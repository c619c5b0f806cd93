"""CSV import utilities to load employees and shifts into the store."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from roster.domain.db import Store
from roster.domain.errors import ValidationError
from roster.domain.repositories import EmployeeRepository, ShiftRepository
from roster.domain.validation import coerce_employee_id

logger = logging.getLogger(__name__)


def _read(csv_path: str | Path) -> pd.DataFrame:
    # Everything as text; empty cells become "" rather than NaN
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    df.columns = df.columns.str.lower().str.strip()
    return df


def _optional(row: pd.Series, column: str) -> Optional[Any]:
    value = row.get(column, "")
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def import_employees_csv(store: Store, csv_path: str | Path) -> int:
    """
    Import employees from CSV.

    Required columns: name, role. Optional: email, phone. An ``id`` column is
    ignored; the store assigns new ids. Every row is checked before anything
    is written, and all rows are stored in one transaction.

    Args:
        store: Open store
        csv_path: Path to employees CSV

    Returns:
        Number of employees imported
    """
    df = _read(csv_path)

    records = []
    for _, row in df.iterrows():
        records.append({
            "name": str(row.get("name", "")).strip(),
            "role": str(row.get("role", "")).strip(),
            "email": _optional(row, "email"),
            "phone": _optional(row, "phone"),
        })

    employees = EmployeeRepository.bulk_create(store, records)

    logger.info("Imported %d employees from %s", len(employees), csv_path)
    return len(employees)


def import_shifts_csv(store: Store, csv_path: str | Path) -> int:
    """
    Import shifts from CSV.

    Required columns: date, start_time, end_time, position. Optional:
    employee_id, notes. ``employee_id`` is stored as given, like the API does.
    Every row is checked before anything is written, and all rows are stored
    in one transaction.

    Args:
        store: Open store
        csv_path: Path to shifts CSV

    Returns:
        Number of shifts imported
    """
    df = _read(csv_path)

    records = []
    for number, (_, row) in enumerate(df.iterrows(), start=1):
        try:
            employee_id = coerce_employee_id(_optional(row, "employee_id"))
        except ValidationError as e:
            raise ValidationError(f"Row {number}: {e.message}") from e
        records.append({
            "date": str(row.get("date", "")).strip(),
            "start_time": str(row.get("start_time", "")).strip(),
            "end_time": str(row.get("end_time", "")).strip(),
            "position": str(row.get("position", "")).strip(),
            "employee_id": employee_id,
            "notes": _optional(row, "notes"),
        })

    shifts = ShiftRepository.bulk_create(store, records)

    logger.info("Imported %d shifts from %s", len(shifts), csv_path)
    return len(shifts)
