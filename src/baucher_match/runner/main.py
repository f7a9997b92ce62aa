"""
CLI main entry point.
"""

import argparse
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import IO, Any

from ..commands import CommandDispatcher, CommandResult
from ..config import ConfigValidationError, create_default_config, load_config
from ..schemas.statement import (
    extract_month_from_filename,
    extract_year_from_filename,
    now_timestamp,
)
from ..state_store import StatementStore, StorageError, StoreSetupError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False, level: str = "INFO", log_file: Path | None = None) -> None:
    """Configure logging (stderr, plus an optional rotating file)."""
    log_level = logging.DEBUG if verbose else logging.getLevelName(level.upper())
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=5 * 1024 * 1024,  # 5 MB
                backupCount=3,
                encoding="utf-8",
            )
        )

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        handlers=handlers,
        force=True,
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="baucher-match",
        description="Store and query processed bank statement summaries",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # add command
    add_parser = subparsers.add_parser("add", help="Record a processed statement")
    add_parser.add_argument("--filename", type=str, required=True, help="Statement file name")
    add_parser.add_argument(
        "--month",
        type=str,
        help="Month abbreviation (Ene..Dic); default: taken from the filename",
    )
    add_parser.add_argument(
        "--year",
        type=int,
        help="Statement year; default: taken from the filename",
    )
    add_parser.add_argument("--ingreso", type=float, required=True, help="Income total")
    add_parser.add_argument(
        "--total-count",
        type=int,
        required=True,
        help="Number of transactions in the statement",
    )
    add_parser.add_argument(
        "--processed-at",
        type=str,
        help="Processing timestamp (default: now, UTC)",
    )

    # list command
    list_parser = subparsers.add_parser("list", help="List recorded statements")
    list_parser.add_argument("--year", type=int, help="Only statements for this year")

    # totals command
    subparsers.add_parser("totals", help="Show income and transaction totals per month")

    # years command
    subparsers.add_parser("years", help="List years with recorded statements")

    # delete command
    delete_parser = subparsers.add_parser("delete", help="Delete one statement by ID")
    delete_parser.add_argument("id", type=int, help="Statement ID")

    # clear command
    clear_parser = subparsers.add_parser("clear", help="Delete ALL statements")
    clear_parser.add_argument(
        "--yes",
        action="store_true",
        help="Confirm deleting every statement",
    )

    # db-path command
    subparsers.add_parser("db-path", help="Show the database file location")

    # greet command
    greet_parser = subparsers.add_parser("greet", help="Diagnostic echo")
    greet_parser.add_argument("name", type=str)

    # stats command
    subparsers.add_parser("stats", help="Show store statistics")

    # serve command
    subparsers.add_parser(
        "serve",
        help="Answer JSON-lines commands on stdin/stdout (for the GUI process)",
    )

    # init-config command
    init_parser = subparsers.add_parser("init-config", help="Write a default config file")
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file",
    )

    return parser


def _report(result: CommandResult) -> bool:
    """Print a failure; returns True on success."""
    if not result.ok:
        print(f"❌ {result.error}")
    return result.ok


def cmd_add(
    dispatcher: CommandDispatcher,
    filename: str,
    ingreso: float,
    total_count: int,
    month: str | None = None,
    year: int | None = None,
    processed_at: str | None = None,
) -> int:
    """Record a processed statement."""
    payload = {
        "filename": filename,
        "month": month or extract_month_from_filename(filename).value,
        "year": year if year is not None else extract_year_from_filename(filename),
        "ingreso": ingreso,
        "total_count": total_count,
        "processed_at": processed_at or now_timestamp(),
    }

    result = dispatcher.dispatch("add_statement", payload)
    if not _report(result):
        return 1

    record = result.data
    print(f"✓ Added statement [{record['id']}] {record['filename']} ({record['month']} {record['year']})")
    return 0


def cmd_list(dispatcher: CommandDispatcher, year: int | None = None) -> int:
    """List statements."""
    if year is None:
        result = dispatcher.dispatch("get_all_statements")
    else:
        result = dispatcher.dispatch("get_statements_by_year", {"year": year})
    if not _report(result):
        return 1

    for record in result.data:
        print(
            f"  📄 [{record['id']}] {record['month']} {record['year']}  "
            f"{record['ingreso']:>12.2f}  {record['total_count']:>5} tx  "
            f"{record['filename']}  ({record['processed_at']})"
        )

    print(f"\n✓ {len(result.data)} statement(s)")
    return 0


def cmd_totals(dispatcher: CommandDispatcher) -> int:
    """Show monthly totals."""
    result = dispatcher.dispatch("get_monthly_totals")
    if not _report(result):
        return 1

    for total in result.data:
        print(
            f"  {total['month']} {total['year']}  "
            f"{total['ingreso']:>12.2f}  {total['totalCount']:>6} tx"
        )
    return 0


def cmd_years(dispatcher: CommandDispatcher) -> int:
    """List available years."""
    result = dispatcher.dispatch("get_available_years")
    if not _report(result):
        return 1

    for year in result.data:
        print(f"  {year}")
    return 0


def cmd_delete(dispatcher: CommandDispatcher, statement_id: int) -> int:
    """Delete one statement."""
    result = dispatcher.dispatch("delete_statement", {"id": statement_id})
    if not _report(result):
        return 1

    print(f"✓ Deleted statement {statement_id}")
    return 0


def cmd_clear(dispatcher: CommandDispatcher, yes: bool) -> int:
    """Delete every statement."""
    if not yes:
        print("⚠️  This deletes every recorded statement. Re-run with --yes to confirm.")
        return 1

    result = dispatcher.dispatch("clear_all_statements")
    if not _report(result):
        return 1

    print("✓ All statements deleted")
    return 0


def cmd_db_path(dispatcher: CommandDispatcher) -> int:
    """Print the database location."""
    result = dispatcher.dispatch("get_database_path")
    if not _report(result):
        return 1

    print(result.data)
    return 0


def cmd_stats(store: StatementStore) -> int:
    """Show store statistics."""
    try:
        stats = store.get_stats()
    except StorageError as e:
        print(f"❌ {e}")
        return 1

    print("\n📊 Statement Store")
    print("=" * 40)
    print(f"  Statements:             {stats['statements']}")
    print(f"  Total ingreso:          {stats['total_ingreso']:.2f}")
    print(f"  Total transactions:     {stats['total_transactions']}")
    print(f"  Years:                  {stats['years']}")
    print(f"  Database:               {store.storage_path()}")
    print()

    return 0


def handle_request(dispatcher: CommandDispatcher, line: str) -> dict[str, Any]:
    """
    Answer one JSON-lines request.

    Request:  {"id": <any>, "command": "get_all_statements", "args": {...}}
    Response: {"id": <same>, "ok": true, "data": ...} or
              {"id": <same>, "ok": false, "error": "..."}
    """
    try:
        request = json.loads(line)
    except json.JSONDecodeError as e:
        return CommandResult.failure(f"Invalid JSON: {e}").to_dict()

    if not isinstance(request, dict) or not isinstance(request.get("command"), str):
        return CommandResult.failure("Request must be an object with a 'command' string").to_dict()

    response = dispatcher.dispatch(request["command"], request.get("args")).to_dict()
    if "id" in request:
        response = {"id": request["id"], **response}
    return response


def serve(dispatcher: CommandDispatcher, stdin: IO[str], stdout: IO[str]) -> int:
    """Read one request per line until EOF, writing one response per line."""
    logger.info("Serving commands on stdin/stdout")
    for line in stdin:
        if not line.strip():
            continue
        response = handle_request(dispatcher, line)
        stdout.write(json.dumps(response, ensure_ascii=False) + "\n")
        stdout.flush()

    logger.info("Input closed, stopping")
    return 0


def cmd_init_config(config_path: Path, force: bool) -> int:
    """Write a default config file."""
    if config_path.exists() and not force:
        print(f"❌ {config_path} already exists (use --force to overwrite)")
        return 1

    create_default_config(config_path)
    print(f"✓ Wrote {config_path}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init-config":
        return cmd_init_config(parsed.config, parsed.force)

    # Load config
    try:
        config = load_config(parsed.config)
        errors = config.validate()
        if errors:
            raise ConfigValidationError("; ".join(errors))
    except Exception as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    try:
        setup_logging(
            parsed.verbose,
            level=config.logging.level,
            log_file=config.log_path if config.logging.log_to_file else None,
        )
    except OSError as e:
        logger.critical(f"Cannot open log file {config.log_path}: {e}")
        print(f"❌ Failed to open log file: {e}")
        return 1

    # Open the store once; failures here are fatal
    try:
        store = StatementStore.from_config(config)
    except StoreSetupError as e:
        logger.critical(f"Cannot open statement store: {e}")
        print(f"❌ {e}")
        return 1

    with store:
        return run_command(parsed, store)


def run_command(parsed: argparse.Namespace, store: StatementStore) -> int:
    """Route a parsed command to its handler."""
    dispatcher = CommandDispatcher(store)

    if parsed.command == "add":
        return cmd_add(
            dispatcher,
            filename=parsed.filename,
            ingreso=parsed.ingreso,
            total_count=parsed.total_count,
            month=parsed.month,
            year=parsed.year,
            processed_at=parsed.processed_at,
        )
    elif parsed.command == "list":
        return cmd_list(dispatcher, parsed.year)
    elif parsed.command == "totals":
        return cmd_totals(dispatcher)
    elif parsed.command == "years":
        return cmd_years(dispatcher)
    elif parsed.command == "delete":
        return cmd_delete(dispatcher, parsed.id)
    elif parsed.command == "clear":
        return cmd_clear(dispatcher, parsed.yes)
    elif parsed.command == "db-path":
        return cmd_db_path(dispatcher)
    elif parsed.command == "greet":
        result = dispatcher.dispatch("greet", {"name": parsed.name})
        print(result.data)
        return 0
    elif parsed.command == "stats":
        return cmd_stats(store)
    elif parsed.command == "serve":
        return serve(dispatcher, sys.stdin, sys.stdout)
    else:
        return 1


if __name__ == "__main__":
    sys.exit(main())
