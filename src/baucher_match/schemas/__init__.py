"""
SSOT schemas for data entering the statement store.
"""

from .statement import (
    StatementInput,
    StatementValidationError,
    extract_month_from_filename,
    extract_year_from_filename,
    now_timestamp,
)

__all__ = [
    "StatementInput",
    "StatementValidationError",
    "extract_month_from_filename",
    "extract_year_from_filename",
    "now_timestamp",
]
