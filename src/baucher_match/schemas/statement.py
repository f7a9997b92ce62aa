"""
Statement input schema and filename helpers.

Everything crossing the command boundary into the store goes through
StatementInput, which checks types and normalizes the month to its
canonical abbreviation. The frontend sends camelCase keys (totalCount,
processedAt); snake_case is accepted as well.
"""

import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from ..state_store.months import FULL_MONTH_NAMES, Month
from ..state_store.sqlite_store import StatementRecord

YEAR_PATTERN = re.compile(r"20\d{2}")
MONTH_NAME_PATTERN = re.compile("|".join(FULL_MONTH_NAMES), re.IGNORECASE)

# SQLite INTEGER is a signed 64-bit value
SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1


class StatementValidationError(ValueError):
    """Raised when statement input is missing fields or has invalid values."""

    pass


def now_timestamp() -> str:
    """Current UTC time as ISO-8601 with a Z suffix."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def extract_year_from_filename(filename: str, default: int | None = None) -> int:
    """
    Find a 20xx year in a statement filename.

    Falls back to `default`, or the current year when no default is given.

    Examples:
        >>> extract_year_from_filename("estado_cuenta_MARZO_2024.pdf")
        2024
    """
    match = YEAR_PATTERN.search(filename)
    if match:
        return int(match.group(0))
    if default is not None:
        return default
    return datetime.now().year


def extract_month_from_filename(filename: str, default: Month | None = None) -> Month:
    """
    Find a full Spanish month name (ENERO..DICIEMBRE) in a filename.

    Falls back to `default`, or the current month when no default is given.

    Examples:
        >>> extract_month_from_filename("estado_cuenta_marzo_2024.pdf")
        <Month.MAR: 'Mar'>
    """
    match = MONTH_NAME_PATTERN.search(filename)
    if match:
        return FULL_MONTH_NAMES[match.group(0).upper()]
    if default is not None:
        return default
    return Month.from_ordinal(datetime.now().month)


def check_int_range(value: int, field_name: str) -> int:
    """Reject integers SQLite cannot store."""
    if not SQLITE_INT_MIN <= value <= SQLITE_INT_MAX:
        raise StatementValidationError(f"{field_name}: integer out of range, got {value}")
    return value


def _require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise StatementValidationError(f"{field_name}: expected an integer, got {value!r}")
    if isinstance(value, int):
        return check_int_range(value, field_name)
    if isinstance(value, float) and value.is_integer():
        return check_int_range(int(value), field_name)
    if isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            pass
        else:
            return check_int_range(parsed, field_name)
    raise StatementValidationError(f"{field_name}: expected an integer, got {value!r}")


def _require_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise StatementValidationError(f"{field_name}: expected a number, got {value!r}")
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError) as e:
        raise StatementValidationError(f"{field_name}: expected a number, got {value!r}") from e
    if not math.isfinite(number):
        raise StatementValidationError(f"{field_name}: must be finite, got {number}")
    return number


def _require_text(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise StatementValidationError(f"{field_name}: must be a non-empty string")
    return value


@dataclass
class StatementInput:
    """A statement as submitted by the frontend, before it has an ID."""

    filename: str
    month: str
    year: int
    ingreso: float
    total_count: int
    processed_at: str

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "StatementInput":
        """
        Build and validate from a command payload.

        Raises:
            StatementValidationError: On missing keys or invalid values.
        """
        if not isinstance(data, dict):
            raise StatementValidationError(f"Statement payload must be an object, got {type(data).__name__}")

        def pick(*keys: str) -> Any:
            for key in keys:
                if key in data:
                    return data[key]
            raise StatementValidationError(f"Missing field: {keys[0]}")

        statement = cls(
            filename=pick("filename"),
            month=pick("month"),
            year=pick("year"),
            ingreso=pick("ingreso"),
            total_count=pick("total_count", "totalCount"),
            processed_at=pick("processed_at", "processedAt"),
        )
        return statement.validate()

    def validate(self) -> "StatementInput":
        """Check every field; returns a normalized copy."""
        filename = _require_text(self.filename, "filename")
        month_text = _require_text(self.month, "month")
        month = Month.parse(month_text)
        if month is None:
            allowed = ", ".join(m.value for m in Month)
            raise StatementValidationError(f"month: unknown abbreviation {month_text!r} (expected one of {allowed})")

        total_count = _require_int(self.total_count, "total_count")
        if total_count < 0:
            raise StatementValidationError(f"total_count: must be >= 0, got {total_count}")

        return StatementInput(
            filename=filename,
            month=month.value,
            year=_require_int(self.year, "year"),
            ingreso=_require_float(self.ingreso, "ingreso"),
            total_count=total_count,
            processed_at=_require_text(self.processed_at, "processed_at"),
        )

    def to_record(self) -> StatementRecord:
        """Record ready for StatementStore.insert (no ID yet)."""
        return StatementRecord(
            filename=self.filename,
            month=self.month,
            year=self.year,
            ingreso=self.ingreso,
            total_count=self.total_count,
            processed_at=self.processed_at,
        )
