"""
CLI runner module.

Provides commands:
- add / list / totals / years: record and query statements
- delete / clear: remove statements
- db-path / stats / greet: diagnostics
- serve: JSON-lines command loop for the GUI process
- init-config: write a default config file
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
