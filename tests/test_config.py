"""Tests for configuration loading."""

import sys
from pathlib import Path

import pytest

from baucher_match.config import (
    DEFAULT_DB_FILENAME,
    Config,
    LoggingConfig,
    StorageConfig,
    create_default_config,
    get_app_data_dir,
    load_config,
)

ENV_VARS = ["BAUCHER_MATCH_DATA_DIR", "BAUCHER_MATCH_DB_FILENAME", "BAUCHER_MATCH_LOG_LEVEL"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "nope.yaml")

        assert config.app_name == "baucher-match"
        assert config.storage.data_dir is None
        assert config.storage.db_filename == DEFAULT_DB_FILENAME
        assert config.logging.level == "INFO"
        assert config.logging.log_to_file is False

    def test_yaml_values(self, config_file, tmp_path):
        config = load_config(config_file)

        assert config.storage.data_dir == tmp_path / "data"
        assert config.db_path == tmp_path / "data" / "statements.db"
        assert config.logging.level == "DEBUG"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(path).storage.db_filename == DEFAULT_DB_FILENAME

    def test_environment_overrides(self, config_file, tmp_path, monkeypatch):
        monkeypatch.setenv("BAUCHER_MATCH_DATA_DIR", str(tmp_path / "elsewhere"))
        monkeypatch.setenv("BAUCHER_MATCH_DB_FILENAME", "other.db")
        monkeypatch.setenv("BAUCHER_MATCH_LOG_LEVEL", "WARNING")

        config = load_config(config_file)

        assert config.db_path == tmp_path / "elsewhere" / "other.db"
        assert config.logging.level == "WARNING"

    def test_default_config_round_trip(self, tmp_path):
        path = tmp_path / "sub" / "config.yaml"
        create_default_config(path)

        config = load_config(path)

        assert path.exists()
        assert config == Config()


class TestValidate:
    def test_defaults_are_valid(self):
        assert Config().validate() == []

    def test_db_filename_must_be_bare(self):
        config = Config(storage=StorageConfig(db_filename="dir/statements.db"))

        assert any("db_filename" in e for e in config.validate())

    def test_empty_db_filename(self):
        config = Config(storage=StorageConfig(db_filename=""))

        assert any("db_filename" in e for e in config.validate())

    def test_bad_log_level(self):
        config = Config(logging=LoggingConfig(level="LOUD"))

        assert any("logging.level" in e for e in config.validate())


class TestAppDataDir:
    def test_linux_uses_xdg_data_home(self, monkeypatch, tmp_path):
        monkeypatch.setattr(sys, "platform", "linux")
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

        assert get_app_data_dir("baucher-match") == tmp_path / "baucher-match"

    def test_linux_default(self, monkeypatch):
        monkeypatch.setattr(sys, "platform", "linux")
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)

        assert get_app_data_dir("x") == Path.home() / ".local" / "share" / "x"

    def test_macos(self, monkeypatch):
        monkeypatch.setattr(sys, "platform", "darwin")

        assert get_app_data_dir("x") == Path.home() / "Library" / "Application Support" / "x"

    def test_windows(self, monkeypatch, tmp_path):
        monkeypatch.setattr(sys, "platform", "win32")
        monkeypatch.setenv("APPDATA", str(tmp_path))

        assert get_app_data_dir("x") == tmp_path / "x"

    def test_config_without_data_dir_uses_app_data(self, monkeypatch, tmp_path):
        monkeypatch.setattr(sys, "platform", "linux")
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

        assert Config().db_path == tmp_path / "baucher-match" / DEFAULT_DB_FILENAME
