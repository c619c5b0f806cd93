"""CSV export utilities to dump the roster from the store."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from roster.domain.db import Store
from roster.domain.models import ShiftFilter
from roster.domain.repositories import EmployeeRepository, ShiftRepository

logger = logging.getLogger(__name__)

EMPLOYEE_COLUMNS = ["id", "name", "role", "email", "phone", "created_at"]
SHIFT_COLUMNS = [
    "id", "date", "start_time", "end_time", "position",
    "employee_id", "employee_name", "notes", "created_at",
]


def export_employees_csv(store: Store, csv_path: str | Path) -> int:
    """
    Export employees to CSV, ordered by name.

    Args:
        store: Open store
        csv_path: Path to output CSV

    Returns:
        Number of employees exported
    """
    employees = EmployeeRepository.get_all(store)
    records = [emp.to_dict() for emp in employees]

    df = pd.DataFrame(records, columns=EMPLOYEE_COLUMNS)
    df.to_csv(csv_path, index=False)

    logger.info("Exported %d employees to %s", len(records), csv_path)
    return len(records)


def export_shifts_csv(
    store: Store,
    csv_path: str | Path,
    shift_filter: Optional[ShiftFilter] = None,
) -> int:
    """
    Export shifts to CSV, ordered by date then start time.

    Args:
        store: Open store
        csv_path: Path to output CSV
        shift_filter: Optional date / employee restriction, same rules as the API

    Returns:
        Number of shifts exported
    """
    shifts = ShiftRepository.get_all(store, shift_filter)
    records = [shift.to_dict() for shift in shifts]

    df = pd.DataFrame(records, columns=SHIFT_COLUMNS)
    # Nullable ints keep ids as "3" instead of "3.0" when some rows are unassigned
    df["employee_id"] = df["employee_id"].astype("Int64")
    df.to_csv(csv_path, index=False)

    logger.info("Exported %d shifts to %s", len(records), csv_path)
    return len(records)
