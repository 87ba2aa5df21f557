"""Tests for cardboard.lib.config and cardboard.lib.logs."""

import logging
from pathlib import Path

import pytest

from cardboard.lib.config import config_path, load_settings, resolve_base_path
from cardboard.lib.logs import LOGGER_NAME, setup_logging


def _write_config(base: Path, text: str) -> None:
    path = config_path(base)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


class TestResolveBasePath:
    """Tests for resolve_base_path."""

    def test_explicit_path_wins(self, tmp_path):
        assert resolve_base_path(str(tmp_path), environ={"CARDBOARD_PATH": "/elsewhere"}) == tmp_path

    def test_env_var(self, tmp_path):
        assert resolve_base_path(None, environ={"CARDBOARD_PATH": str(tmp_path)}) == tmp_path

    def test_cwd_default(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert resolve_base_path(None, environ={}) == Path.cwd()


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults_without_file(self, tmp_path):
        """No config.env gives default settings."""
        settings = load_settings(tmp_path, environ={})
        assert settings.base_path == tmp_path
        assert settings.log_level == "WARNING"
        assert settings.log_file is None
        assert settings.default_assignee is None

    def test_file_values(self, tmp_path):
        _write_config(tmp_path, "CARDBOARD_LOG_LEVEL=debug\nCARDBOARD_DEFAULT_ASSIGNEE=alice\n")
        settings = load_settings(tmp_path, environ={})
        assert settings.log_level == "DEBUG"
        assert settings.default_assignee == "alice"

    def test_environment_overrides_file(self, tmp_path):
        """Environment variables take precedence over config.env."""
        _write_config(tmp_path, "CARDBOARD_DEFAULT_ASSIGNEE=alice\nCARDBOARD_LOG_LEVEL=INFO\n")
        settings = load_settings(tmp_path, environ={"CARDBOARD_DEFAULT_ASSIGNEE": "bob"})
        assert settings.default_assignee == "bob"
        assert settings.log_level == "INFO"

    def test_relative_log_file(self, tmp_path):
        """A relative log file resolves inside .cardboard/."""
        _write_config(tmp_path, "CARDBOARD_LOG_FILE=cardboard.log\n")
        settings = load_settings(tmp_path, environ={})
        assert settings.log_file == tmp_path / ".cardboard" / "cardboard.log"

    def test_invalid_level_falls_back(self, tmp_path, caplog):
        """Unknown levels fall back to WARNING with a logged warning."""
        with caplog.at_level(logging.WARNING, logger="cardboard.lib.config"):
            settings = load_settings(tmp_path, environ={"CARDBOARD_LOG_LEVEL": "LOUD"})
        assert settings.log_level == "WARNING"
        assert "Unknown CARDBOARD_LOG_LEVEL 'LOUD'" in caplog.text

    def test_malformed_file(self, tmp_path):
        _write_config(tmp_path, "CARDBOARD_DEFAULT_ASSIGNEE=$(whoami)\n")
        with pytest.raises(ValueError):
            load_settings(tmp_path, environ={})


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_file_only(self, tmp_path):
        """to_stderr=False with a file attaches just the file handler."""
        log_file = tmp_path / "logs" / "cardboard.log"
        log = setup_logging("INFO", log_file=log_file, to_stderr=False)
        assert [type(h) for h in log.handlers] == [logging.FileHandler]
        logging.getLogger("cardboard.service").info("[SERVICE] hello")
        log.handlers[0].flush()
        assert "[SERVICE] hello" in log_file.read_text()

    def test_configures_once(self):
        """A second call keeps the first configuration."""
        first = setup_logging("DEBUG")
        setup_logging("ERROR")
        assert first is logging.getLogger(LOGGER_NAME)
        assert first.level == logging.DEBUG
        assert len(first.handlers) == 1

    def test_null_handler_when_silent(self):
        log = setup_logging("WARNING", to_stderr=False)
        assert [type(h) for h in log.handlers] == [logging.NullHandler]

    def test_unusable_log_file(self, tmp_path):
        """A log path under a regular file raises OSError and attaches nothing."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(OSError):
            setup_logging("INFO", log_file=blocker / "cardboard.log")
        assert logging.getLogger(LOGGER_NAME).handlers == []
