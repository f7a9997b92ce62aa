"""
GUI command surface.

Commands:
- add_statement, get_all_statements, get_statements_by_year
- get_monthly_totals, get_available_years
- delete_statement, clear_all_statements
- get_database_path, greet
"""

from .handlers import CommandDispatcher, CommandResult, UnknownCommandError, greet

__all__ = [
    "CommandDispatcher",
    "CommandResult",
    "UnknownCommandError",
    "greet",
]
