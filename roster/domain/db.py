"""Database initialization and utilities for the SQLite-backed store."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

from .errors import StoreError

logger = logging.getLogger(__name__)

# SQLite INTEGER is a signed 64-bit value
SQLITE_INT_MIN = -(2 ** 63)
SQLITE_INT_MAX = 2 ** 63 - 1

metadata = sa.MetaData()

employees = sa.Table(
    "employees",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
    sa.Column("name", sa.Text, nullable=False),
    sa.Column("role", sa.Text, nullable=False),
    sa.Column("email", sa.Text),
    sa.Column("phone", sa.Text),
    sa.Column("created_at", sa.DateTime, server_default=sa.func.current_timestamp()),
    sqlite_autoincrement=True,
)

# employee_id is a plain column, not a ForeignKey: deleting an employee leaves
# their shifts untouched.
shifts = sa.Table(
    "shifts",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
    sa.Column("date", sa.Text, nullable=False),
    sa.Column("start_time", sa.Text, nullable=False),
    sa.Column("end_time", sa.Text, nullable=False),
    sa.Column("position", sa.Text, nullable=False),
    sa.Column("employee_id", sa.Integer),
    sa.Column("notes", sa.Text),
    sa.Column("created_at", sa.DateTime, server_default=sa.func.current_timestamp()),
    sqlite_autoincrement=True,
)


def fits_integer_column(value: int) -> bool:
    """True when ``value`` can be stored in, or compared against, an INTEGER column."""
    return SQLITE_INT_MIN <= value <= SQLITE_INT_MAX


class Store:
    """Owns the engine for one SQLite database file.

    Create one per process, call ``init_database`` before serving, and
    ``close`` on shutdown. Each public method is a single transaction.
    Writes take a process-wide lock so only one commit is in flight at a
    time; readers do not wait on it.
    """

    def __init__(self, db_path: str | Path, echo: bool = False):
        self.db_path = Path(db_path)
        self._write_lock = threading.Lock()
        self._closed = False
        with self._translate_errors():
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.engine = sa.create_engine(
                f"sqlite:///{self.db_path}",
                echo=echo,
                connect_args={"check_same_thread": False},
            )

    def __repr__(self) -> str:
        return f"<Store(path='{self.db_path}', closed={self._closed})>"

    @contextmanager
    def _translate_errors(self) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            orig = getattr(e, "orig", None)
            raise StoreError(str(orig) if orig is not None else str(e)) from e
        except (OSError, OverflowError) as e:
            raise StoreError(str(e)) from e

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreError("Store is closed")

    @contextmanager
    def _reading(self) -> Iterator[sa.Connection]:
        self._ensure_open()
        with self._translate_errors(), self.engine.connect() as conn:
            yield conn

    @contextmanager
    def _writing(self) -> Iterator[sa.Connection]:
        with self._write_lock:
            self._ensure_open()
            with self._translate_errors(), self.engine.begin() as conn:
                yield conn

    def init_database(self) -> None:
        """Create the tables if they are missing. Existing data is kept."""
        with self._writing() as conn:
            metadata.create_all(conn, checkfirst=True)
        logger.info("Store initialized at %s", self.db_path)

    def insert(self, table: sa.Table, values: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored, including its new id."""
        with self._writing() as conn:
            result = conn.execute(sa.insert(table).values(**values))
            new_id = result.inserted_primary_key[0]
            row = conn.execute(sa.select(table).where(table.c.id == new_id)).mappings().one()
        logger.debug("Inserted %s id=%s", table.name, new_id)
        return dict(row)

    def insert_many(self, table: sa.Table, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert several rows in one transaction; either all are stored or none."""
        stored = []
        with self._writing() as conn:
            for values in rows:
                result = conn.execute(sa.insert(table).values(**values))
                new_id = result.inserted_primary_key[0]
                row = conn.execute(sa.select(table).where(table.c.id == new_id)).mappings().one()
                stored.append(dict(row))
        logger.debug("Inserted %d rows into %s", len(stored), table.name)
        return stored

    def get(self, table: sa.Table, record_id: int) -> Optional[Dict[str, Any]]:
        if not fits_integer_column(record_id):
            return None
        return self.fetch_one(sa.select(table).where(table.c.id == record_id))

    def list_all(self, table: sa.Table, *order_by: Any) -> List[Dict[str, Any]]:
        return self.fetch_all(sa.select(table).order_by(*order_by))

    def fetch_one(self, stmt: sa.Select) -> Optional[Dict[str, Any]]:
        """Run a select and return the first row, or None."""
        with self._reading() as conn:
            row = conn.execute(stmt).mappings().first()
        return dict(row) if row is not None else None

    def fetch_all(self, stmt: sa.Select) -> List[Dict[str, Any]]:
        """Run a select and return every row."""
        with self._reading() as conn:
            return [dict(row) for row in conn.execute(stmt).mappings()]

    def update(self, table: sa.Table, record_id: int, values: Dict[str, Any]) -> int:
        """Overwrite columns on one row. Returns the number of rows changed."""
        if not fits_integer_column(record_id):
            return 0
        with self._writing() as conn:
            result = conn.execute(
                sa.update(table).where(table.c.id == record_id).values(**values)
            )
        logger.debug("Updated %s id=%s rows=%d", table.name, record_id, result.rowcount)
        return result.rowcount

    def delete(self, table: sa.Table, record_id: int) -> int:
        """Hard-delete one row. Returns the number of rows removed."""
        if not fits_integer_column(record_id):
            return 0
        with self._writing() as conn:
            result = conn.execute(sa.delete(table).where(table.c.id == record_id))
        logger.debug("Deleted %s id=%s rows=%d", table.name, record_id, result.rowcount)
        return result.rowcount

    def close(self) -> None:
        """Dispose of the engine once any in-flight write has committed."""
        with self._write_lock:
            if self._closed:
                return
            self._closed = True
            self.engine.dispose()
        logger.info("Store at %s closed", self.db_path)
