"""
Configuration management (SSOT).

All config keys for the statement ledger live here; no other module
should invent config keys.

Key invariants:
- storage.data_dir of None means "use the per-user application data dir"
- The database file is always data_dir / db_filename
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

import yaml

DEFAULT_APP_NAME = "baucher-match"
DEFAULT_DB_FILENAME = "baucher_match.db"
DEFAULT_LOG_FILENAME = "baucher_match.log"


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


def get_app_data_dir(app_name: str = DEFAULT_APP_NAME) -> Path:
    """
    Get the platform-specific per-user application data directory.

    - Windows: %APPDATA%\\AppName
    - macOS: ~/Library/Application Support/AppName
    - Linux: $XDG_DATA_HOME/AppName (default ~/.local/share/AppName)
    """
    home = Path.home()

    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", home / "AppData" / "Roaming"))
        return base / app_name

    elif sys.platform == "darwin":
        return home / "Library" / "Application Support" / app_name

    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME") or home / ".local" / "share"
        return Path(xdg_data_home) / app_name


@dataclass
class StorageConfig:
    """Where the statement database lives."""

    # None: resolve with get_app_data_dir()
    data_dir: Path | None = None
    db_filename: str = DEFAULT_DB_FILENAME


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"
    log_to_file: bool = False
    log_filename: str = DEFAULT_LOG_FILENAME


@dataclass
class Config:
    """Application configuration (SSOT)."""

    app_name: str = DEFAULT_APP_NAME
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def data_dir(self) -> Path:
        """Resolved data directory (explicit or platform default)."""
        if self.storage.data_dir is not None:
            return Path(self.storage.data_dir).expanduser()
        return get_app_data_dir(self.app_name)

    @property
    def db_path(self) -> Path:
        """Full path of the statement database file."""
        return self.data_dir / self.storage.db_filename

    @property
    def log_path(self) -> Path:
        return self.data_dir / self.logging.log_filename

    def validate(self) -> list[str]:
        """Validate configuration completeness and consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if not self.app_name:
            errors.append("app_name is required")
        if not self.storage.db_filename:
            errors.append("storage.db_filename is required")
        elif Path(self.storage.db_filename).name != self.storage.db_filename:
            errors.append("storage.db_filename must be a bare file name, not a path")

        level = logging.getLevelName(self.logging.level.upper())
        if not isinstance(level, int):
            errors.append(f"logging.level is not a valid level: {self.logging.level}")

        return errors


def load_config(config_path: Path) -> Config:
    """
    Load configuration from YAML file.

    A missing file yields the defaults. Environment variables override
    config values:
    - BAUCHER_MATCH_DATA_DIR
    - BAUCHER_MATCH_DB_FILENAME
    - BAUCHER_MATCH_LOG_LEVEL
    """
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    # Storage config
    storage_data = data.get("storage", {}) or {}
    data_dir = os.environ.get("BAUCHER_MATCH_DATA_DIR", storage_data.get("data_dir"))
    storage = StorageConfig(
        data_dir=Path(data_dir) if data_dir else None,
        db_filename=os.environ.get(
            "BAUCHER_MATCH_DB_FILENAME", storage_data.get("db_filename", DEFAULT_DB_FILENAME)
        ),
    )

    # Logging config
    logging_data = data.get("logging", {}) or {}
    log_config = LoggingConfig(
        level=os.environ.get("BAUCHER_MATCH_LOG_LEVEL", logging_data.get("level", "INFO")),
        log_to_file=bool(logging_data.get("log_to_file", False)),
        log_filename=logging_data.get("log_filename", DEFAULT_LOG_FILENAME),
    )

    return Config(
        app_name=data.get("app_name", DEFAULT_APP_NAME),
        storage=storage,
        logging=log_config,
    )


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# Baucher Match statement ledger configuration

app_name: "baucher-match"

storage:
  data_dir: null                    # null: per-user application data directory
  db_filename: "baucher_match.db"

logging:
  level: "INFO"                     # DEBUG, INFO, WARNING, ERROR
  log_to_file: false                # Also write a rotating log next to the database
  log_filename: "baucher_match.log"
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        f.write(default_config)
