"""Test fixtures and utilities."""

from pathlib import Path

import pytest

from baucher_match.state_store import StatementRecord, StatementStore
from fixtures import SAMPLE_STATEMENTS


@pytest.fixture
def temp_db(tmp_path) -> Path:
    """Temporary database path for testing."""
    return tmp_path / "test_statements.db"


@pytest.fixture
def store(temp_db):
    """A fresh statement store, closed after the test."""
    store = StatementStore(temp_db)
    yield store
    store.close()


@pytest.fixture
def populated_store(store):
    """Store holding SAMPLE_STATEMENTS."""
    for fields in SAMPLE_STATEMENTS:
        store.insert(StatementRecord(**fields))
    return store


@pytest.fixture
def sample_statement() -> dict:
    """Sample add_statement payload as sent by the frontend (camelCase)."""
    return {
        "filename": "jan.pdf",
        "month": "Ene",
        "year": 2024,
        "ingreso": 1234.56,
        "totalCount": 42,
        "processedAt": "2024-01-15T10:00:00Z",
    }


@pytest.fixture
def config_file(tmp_path) -> Path:
    """YAML config pointing the data dir at tmp_path."""
    path = tmp_path / "config.yaml"
    path.write_text(
        f"""
storage:
  data_dir: "{(tmp_path / 'data').as_posix()}"
  db_filename: "statements.db"
logging:
  level: "DEBUG"
"""
    )
    return path
