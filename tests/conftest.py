"""Shared fixtures for cardboard tests."""

import logging

import pytest

from cardboard.lib.logs import LOGGER_NAME
from cardboard.service import BoardService


@pytest.fixture(autouse=True)
def reset_cardboard_logger():
    """setup_logging configures the package logger once per process; start each test clean."""
    log = logging.getLogger(LOGGER_NAME)
    saved = (list(log.handlers), log.level)
    for h in list(log.handlers):
        log.removeHandler(h)
    yield
    for h in list(log.handlers):
        log.removeHandler(h)
        h.close()
    for h in saved[0]:
        log.addHandler(h)
    log.setLevel(saved[1])


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's CARDBOARD_* variables out of the tests."""
    for key in ("CARDBOARD_PATH", "CARDBOARD_LOG_LEVEL", "CARDBOARD_LOG_FILE", "CARDBOARD_DEFAULT_ASSIGNEE"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def board_service(tmp_path):
    """An initialized board named 'Project' (prefix PRO) in tmp_path."""
    service = BoardService(tmp_path)
    service.initialize(name="Project")
    return service


@pytest.fixture
def cards(board_service):
    """CardService over a freshly initialized board."""
    return board_service.open_card_service()
