"""
Command surface for the GUI frontend.

Each command maps 1:1 onto a StatementStore operation (plus the
diagnostic `greet`). Commands never raise: storage and validation
failures come back as CommandResult(ok=False, error=...).
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..schemas.statement import StatementInput, StatementValidationError, check_int_range
from ..state_store import StatementStore, StorageError

logger = logging.getLogger(__name__)


class UnknownCommandError(KeyError):
    """Raised when a command name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown command: {self.name}"


@dataclass
class CommandResult:
    """Outcome of one command, as returned across the GUI boundary."""

    ok: bool
    data: Any = None
    error: str | None = None

    @classmethod
    def success(cls, data: Any) -> "CommandResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "CommandResult":
        return cls(ok=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": self.data}
        return {"ok": False, "error": self.error}


def _arg(args: dict[str, Any], name: str) -> Any:
    if name not in args:
        raise StatementValidationError(f"Missing argument: {name}")
    return args[name]


def _int_arg(args: dict[str, Any], name: str) -> int:
    value = _arg(args, name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise StatementValidationError(f"{name}: expected an integer, got {value!r}")
    return check_int_range(value, name)


def greet(name: str) -> str:
    """Diagnostic echo; touches no storage."""
    return f"Hello, {name}! You've been greeted from Python!"


class CommandDispatcher:
    """
    Routes named commands to a StatementStore.

    The store is owned by the caller (opened once at startup) and shared
    by every command.
    """

    def __init__(self, store: StatementStore):
        self.store = store
        self._handlers: dict[str, Callable[[dict[str, Any]], Any]] = {
            "greet": self._greet,
            "add_statement": self._add_statement,
            "get_all_statements": self._get_all_statements,
            "get_statements_by_year": self._get_statements_by_year,
            "get_monthly_totals": self._get_monthly_totals,
            "get_available_years": self._get_available_years,
            "delete_statement": self._delete_statement,
            "clear_all_statements": self._clear_all_statements,
            "get_database_path": self._get_database_path,
        }

    @property
    def commands(self) -> list[str]:
        """Registered command names."""
        return sorted(self._handlers)

    def handler_for(self, name: str) -> Callable[[dict[str, Any]], Any]:
        """Look up a handler; accepts add_statement or add-statement."""
        key = name.strip().replace("-", "_")
        try:
            return self._handlers[key]
        except KeyError:
            raise UnknownCommandError(name) from None

    def dispatch(self, name: str, args: dict[str, Any] | None = None) -> CommandResult:
        """Run one command and wrap its outcome."""
        try:
            handler = self.handler_for(name)
        except UnknownCommandError as e:
            logger.warning(str(e))
            return CommandResult.failure(str(e))

        if args is None:
            args = {}
        if not isinstance(args, dict):
            return CommandResult.failure(f"{name}: arguments must be an object")

        try:
            return CommandResult.success(handler(args))
        except StatementValidationError as e:
            logger.warning(f"{name}: invalid input: {e}")
            return CommandResult.failure(str(e))
        except StorageError as e:
            logger.error(f"{name} failed: {e}")
            return CommandResult.failure(str(e))

    # Handlers

    def _greet(self, args: dict[str, Any]) -> str:
        return greet(str(args.get("name", "")))

    def _add_statement(self, args: dict[str, Any]) -> dict[str, Any]:
        statement = StatementInput.from_payload(args)
        record = self.store.insert(statement.to_record())
        logger.info(f"Added statement {record.id}: {record.filename} ({record.month} {record.year})")
        return record.to_dict()

    def _get_all_statements(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        return [record.to_dict() for record in self.store.list_all()]

    def _get_statements_by_year(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        year = _int_arg(args, "year")
        return [record.to_dict() for record in self.store.list_by_year(year)]

    def _get_monthly_totals(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        return [total.to_dict() for total in self.store.monthly_totals()]

    def _get_available_years(self, args: dict[str, Any]) -> list[int]:
        return self.store.distinct_years()

    def _delete_statement(self, args: dict[str, Any]) -> bool:
        return self.store.delete_by_id(_int_arg(args, "id"))

    def _clear_all_statements(self, args: dict[str, Any]) -> bool:
        return self.store.delete_all()

    def _get_database_path(self, args: dict[str, Any]) -> str:
        return self.store.storage_path()
