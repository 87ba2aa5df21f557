"""
Configuration loading.

Settings come from <base>/.cardboard/config.env, overridden by environment
variables of the same name. The board directory itself defaults to
$CARDBOARD_PATH or the current directory.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from . import envparse
from .storage import board_dir

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.env"
DEFAULT_LOG_LEVEL = "WARNING"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

KNOWN_KEYS = (
    "CARDBOARD_LOG_LEVEL",
    "CARDBOARD_LOG_FILE",
    "CARDBOARD_DEFAULT_ASSIGNEE",
)


@dataclass
class Settings:
    """Board-level settings from config.env and the environment."""
    base_path: Path
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Path | None = None
    default_assignee: str | None = None


def resolve_base_path(path: str | Path | None, environ: Mapping[str, str] | None = None) -> Path:
    """Pick the board directory: explicit path > $CARDBOARD_PATH > cwd."""
    environ = os.environ if environ is None else environ
    if path:
        return Path(path).expanduser()
    if environ.get("CARDBOARD_PATH"):
        return Path(environ["CARDBOARD_PATH"]).expanduser()
    return Path.cwd()


def config_path(base_path: Path) -> Path:
    return board_dir(base_path) / CONFIG_FILE


def load_settings(base_path: Path, environ: Mapping[str, str] | None = None) -> Settings:
    """Load settings for the board rooted at base_path.

    Raises:
        ValueError: if config.env is malformed
    """
    environ = os.environ if environ is None else environ
    values = envparse.load_env(config_path(base_path))
    for key in KNOWN_KEYS:
        if environ.get(key):
            values[key] = environ[key]

    level = values.get("CARDBOARD_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if level not in VALID_LOG_LEVELS:
        logger.warning(f"Unknown CARDBOARD_LOG_LEVEL '{level}', using {DEFAULT_LOG_LEVEL}")
        level = DEFAULT_LOG_LEVEL

    log_file = None
    if values.get("CARDBOARD_LOG_FILE"):
        log_file = Path(values["CARDBOARD_LOG_FILE"]).expanduser()
        if not log_file.is_absolute():
            log_file = board_dir(base_path) / log_file

    return Settings(
        base_path=base_path,
        log_level=level,
        log_file=log_file,
        default_assignee=values.get("CARDBOARD_DEFAULT_ASSIGNEE") or None,
    )
