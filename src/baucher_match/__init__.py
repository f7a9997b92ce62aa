"""
Processed statement ledger for the Baucher Match desktop app.

Persists one summary row per processed bank statement (month, year,
income, transaction count) in a local SQLite file and exposes the
query/delete commands the GUI frontend calls.
"""

__version__ = "0.1.0"
