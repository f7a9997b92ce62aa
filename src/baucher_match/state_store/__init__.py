"""
Statement Store (SQLite-based).

Lightweight persistent DB for processed bank statement summaries:
- Insert / list / list by year
- Monthly totals in calendar order
- Distinct years
- Delete one / delete all
"""

from .months import UNKNOWN_MONTH_ORDINAL, Month, month_ordinal, month_sort_key
from .sqlite_store import (
    MonthlyTotal,
    StatementRecord,
    StatementStore,
    StorageError,
    StoreSetupError,
)

__all__ = [
    "StatementStore",
    "StatementRecord",
    "MonthlyTotal",
    "StorageError",
    "StoreSetupError",
    "Month",
    "UNKNOWN_MONTH_ORDINAL",
    "month_ordinal",
    "month_sort_key",
]
