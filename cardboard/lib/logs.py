"""Logging setup for the cardboard CLI and TUI."""

import logging
import sys
from pathlib import Path

LOGGER_NAME = "cardboard"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "WARNING",
    log_file: Path | None = None,
    to_stderr: bool = True,
) -> logging.Logger:
    """
    Configure the package logger once and return it.

    Args:
        level: Level name, e.g. "DEBUG".
        log_file: Optional file to append to.
        to_stderr: Attach a stderr handler. The TUI passes False because
            stderr output would corrupt the screen.

    Raises:
        OSError: the log file or its directory cannot be created
    """
    log = logging.getLogger(LOGGER_NAME)
    if log.handlers:
        return log

    fmt = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = []

    # Open the file first so a bad path leaves the logger unconfigured
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    if to_stderr:
        handlers.insert(0, logging.StreamHandler(sys.stderr))

    log.setLevel(getattr(logging, level.upper(), logging.WARNING))
    for h in handlers:
        h.setFormatter(fmt)
        log.addHandler(h)

    if not log.handlers:
        log.addHandler(logging.NullHandler())
    return log
