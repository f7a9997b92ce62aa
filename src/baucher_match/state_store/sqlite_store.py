"""
SQLite-based statement store implementation.

Tables:
- processed_statements: One summary row per processed bank statement
  (indexes idx_year and idx_month_year)

A single connection is opened for the lifetime of the store and every
operation runs under one lock, so calls from different GUI threads are
serialized.
"""

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .months import month_sort_key

logger = logging.getLogger(__name__)

TABLE_NAME = "processed_statements"

_COLUMNS = "id, filename, month, year, ingreso, total_count, processed_at"


class StoreSetupError(Exception):
    """Raised when the store cannot be opened (directory, connection or schema).

    Fatal: the application must not start serving commands.
    """

    pass


class StorageError(Exception):
    """Raised when a single store operation fails.

    Recoverable: reported back to the caller, never retried.
    """

    pass


@dataclass
class StatementRecord:
    """Record of a processed bank statement."""

    filename: str
    month: str
    year: int
    ingreso: float
    total_count: int
    processed_at: str  # caller-supplied timestamp
    id: int | None = None  # assigned by the store on insert

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "StatementRecord":
        """Create from database row."""
        return cls(
            id=int(row["id"]),
            filename=str(row["filename"]),
            month=str(row["month"]),
            year=int(row["year"]),
            ingreso=float(row["ingreso"]),
            total_count=int(row["total_count"]),
            processed_at=str(row["processed_at"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "filename": self.filename,
            "month": self.month,
            "year": self.year,
            "ingreso": self.ingreso,
            "total_count": self.total_count,
            "processed_at": self.processed_at,
        }


@dataclass
class MonthlyTotal:
    """Income and transaction count summed over one (month, year)."""

    month: str
    year: int
    ingreso: float
    total_count: int

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "MonthlyTotal":
        return cls(
            month=str(row["month"]),
            year=int(row["year"]),
            ingreso=float(row["total_ingreso"]),
            total_count=int(row["total_transactions"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the keys the frontend charts read."""
        return {
            "month": self.month,
            "year": self.year,
            "ingreso": self.ingreso,
            "totalCount": self.total_count,
        }


class StatementStore:
    """
    SQLite-based store for processed statement summaries.

    Provides:
    - Insert (id assigned by SQLite AUTOINCREMENT)
    - Listing (all, or one year)
    - Monthly totals in calendar order
    - Distinct years
    - Delete one / delete all

    No update: correct a record by deleting it and inserting it again.
    """

    def __init__(self, db_path: Path | str):
        """
        Open (or create) the statement database.

        Args:
            db_path: Path to SQLite database file; parent dirs are created

        Raises:
            StoreSetupError: If the directory, connection or schema cannot
                be set up.
        """
        self.db_path = Path(db_path).expanduser().resolve()
        self._lock = threading.Lock()

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreSetupError(f"Failed to create app data dir: {e}") from e

        try:
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        except sqlite3.Error as e:
            raise StoreSetupError(f"Failed to open database: {e}") from e

        try:
            self._init_db()
        except sqlite3.Error as e:
            self._conn.close()
            raise StoreSetupError(f"Failed to initialize database: {e}") from e

        logger.info(f"Statement database: {self.db_path}")

    @classmethod
    def from_config(cls, config) -> "StatementStore":
        """Open the store at the location named by a Config."""
        return cls(config.db_path)

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Hold the store lock and run one transaction on the shared connection.

        sqlite3 errors and value conversion failures are re-raised as
        StorageError after rollback.
        """
        with self._lock:
            try:
                yield self._conn
                self._conn.commit()
            except sqlite3.Error as e:
                self._rollback_quietly()
                logger.exception("Statement store operation failed")
                raise StorageError(str(e)) from e
            except (KeyError, TypeError, ValueError, OverflowError) as e:
                # Row decoding, or a parameter SQLite cannot bind (int beyond 64 bits)
                self._rollback_quietly()
                logger.exception("Failed to convert statement value")
                raise StorageError(f"Invalid value for {TABLE_NAME}: {e}") from e
            except Exception:
                self._rollback_quietly()
                raise

    def _rollback_quietly(self) -> None:
        try:
            self._conn.rollback()
        except sqlite3.Error as e:
            logger.warning(f"Rollback failed: {e}")

    def _init_db(self) -> None:
        """Initialize database schema (idempotent)."""
        with self._lock:
            self._conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    filename TEXT NOT NULL,
                    month TEXT NOT NULL,
                    year INTEGER NOT NULL,
                    ingreso REAL NOT NULL,
                    total_count INTEGER NOT NULL,
                    processed_at TEXT NOT NULL
                )
            """
            )

            self._conn.execute(f"CREATE INDEX IF NOT EXISTS idx_year ON {TABLE_NAME}(year)")
            self._conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_month_year ON {TABLE_NAME}(month, year)"
            )
            self._conn.commit()

    def close(self) -> None:
        """Close the shared connection. Later operations raise StorageError."""
        with self._lock:
            self._conn.close()

    def __enter__(self) -> "StatementStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # Statement methods

    def insert(self, record: StatementRecord) -> StatementRecord:
        """Insert a statement. Returns a copy carrying the new ID.

        Raises:
            ValueError: If the record already has an ID.
            StorageError: If the row cannot be written.
        """
        if record.id is not None:
            raise ValueError("Statement IDs are assigned by the store; insert with id=None")

        with self._transaction() as conn:
            cursor = conn.execute(
                f"""
                INSERT INTO {TABLE_NAME}
                (filename, month, year, ingreso, total_count, processed_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """,
                (
                    record.filename,
                    record.month,
                    record.year,
                    record.ingreso,
                    record.total_count,
                    record.processed_at,
                ),
            )
            new_id = cursor.lastrowid

        logger.debug(f"Inserted statement {new_id} ({record.filename}, {record.month} {record.year})")
        return replace(record, id=new_id)

    def list_all(self) -> list[StatementRecord]:
        """All statements, newest year first, then newest insert first."""
        with self._transaction() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM {TABLE_NAME} ORDER BY year DESC, id DESC"
            ).fetchall()
            return [StatementRecord.from_row(row) for row in rows]

    def list_by_year(self, year: int) -> list[StatementRecord]:
        """Statements for one year, newest insert first. Unknown year gives []."""
        with self._transaction() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM {TABLE_NAME} WHERE year = ? ORDER BY id DESC",
                (year,),
            ).fetchall()
            return [StatementRecord.from_row(row) for row in rows]

    def monthly_totals(self) -> list[MonthlyTotal]:
        """
        Sum ingreso and total_count per (month, year).

        Ordered by year ascending, then calendar month (Ene..Dic). Month
        values outside the twelve abbreviations come last within their
        year, ordered by text.
        """
        with self._transaction() as conn:
            rows = conn.execute(
                f"""
                SELECT month, year,
                       SUM(ingreso) AS total_ingreso,
                       SUM(total_count) AS total_transactions
                FROM {TABLE_NAME}
                GROUP BY month, year
            """
            ).fetchall()
            totals = [MonthlyTotal.from_row(row) for row in rows]

        return sorted(totals, key=lambda t: (t.year, *month_sort_key(t.month)))

    def distinct_years(self) -> list[int]:
        """Every year present, descending, without duplicates."""
        with self._transaction() as conn:
            rows = conn.execute(
                f"SELECT DISTINCT year FROM {TABLE_NAME} ORDER BY year DESC"
            ).fetchall()
            return [int(row["year"]) for row in rows]

    def delete_by_id(self, statement_id: int) -> bool:
        """Delete a statement. A missing ID is not an error; always returns True."""
        with self._transaction() as conn:
            cursor = conn.execute(f"DELETE FROM {TABLE_NAME} WHERE id = ?", (statement_id,))

        logger.debug(f"Deleted statement {statement_id} (rows: {cursor.rowcount})")
        return True

    def delete_all(self) -> bool:
        """Delete every statement. Always returns True."""
        with self._transaction() as conn:
            cursor = conn.execute(f"DELETE FROM {TABLE_NAME}")

        logger.info(f"Cleared statement store ({cursor.rowcount} rows)")
        return True

    def storage_path(self) -> str:
        """Absolute path of the database file."""
        return str(self.db_path)

    # Statistics

    def get_stats(self) -> dict[str, Any]:
        """Get store statistics."""
        with self._transaction() as conn:
            row = conn.execute(
                f"""
                SELECT COUNT(*) AS count,
                       COALESCE(SUM(ingreso), 0.0) AS total_ingreso,
                       COALESCE(SUM(total_count), 0) AS total_transactions,
                       COUNT(DISTINCT year) AS years
                FROM {TABLE_NAME}
            """
            ).fetchone()

            return {
                "statements": row["count"],
                "total_ingreso": float(row["total_ingreso"]),
                "total_transactions": int(row["total_transactions"]),
                "years": row["years"],
            }
