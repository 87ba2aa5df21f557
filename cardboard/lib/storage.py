"""
JSON persistence for boards.

A board lives at <base>/.cardboard/board.json. Reads are validated against the
board schema and the domain invariants; writes go to a temporary file in the
same directory and are moved into place with os.replace, so a failed write
never leaves a half-written board behind.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from cardboard.domain import engine
from cardboard.domain.errors import BoardNotFound, FormatError, StorageIOError
from cardboard.domain.models import Board
from cardboard.lib import validate

logger = logging.getLogger(__name__)

BOARD_DIR = ".cardboard"
BOARD_FILE = "board.json"
SCHEMA_NAME = "board"


def board_dir(base_path: Path) -> Path:
    return Path(base_path) / BOARD_DIR


def board_path(base_path: Path) -> Path:
    """Returns <base_path>/.cardboard/board.json"""
    return board_dir(base_path) / BOARD_FILE


def find_board_path(start_path: Path) -> Path | None:
    """Search start_path and its parents for a board file."""
    current = Path(start_path).resolve()
    for directory in (current, *current.parents):
        candidate = board_path(directory)
        if candidate.is_file():
            return candidate
    return None


def dump_board(board: Board) -> str:
    return json.dumps(board.to_dict(), indent=2, ensure_ascii=False) + "\n"


def parse_board(text: str, path: Path) -> Board:
    """Decode, schema-check and build a Board, wrapping every failure as FormatError."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatError(path, f"invalid JSON: {e}") from None

    try:
        validate.validate(data, SCHEMA_NAME)
    except validate.SchemaValidationError as e:
        raise FormatError(path, f"{e.detail} at {e.path}") from None

    try:
        board = Board.from_dict(data)
    except (KeyError, ValueError, TypeError) as e:
        raise FormatError(path, f"bad value: {e}") from None

    problems = engine.check_invariants(board)
    if len(board.cards) != len(data["cards"]):
        problems.append("duplicate card ids")
    if problems:
        raise FormatError(path, "; ".join(problems))
    return board


class BoardStore:
    """Load/save gateway for one board file."""

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)
        self.path = board_path(self.base_path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Board:
        """Read the board.

        Raises:
            BoardNotFound: no board file
            FormatError: file is not a valid board
            StorageIOError: file could not be read
        """
        if not self.exists():
            raise BoardNotFound(self.path)
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageIOError(self.path, str(e)) from e
        board = parse_board(text, self.path)
        logger.debug(f"[STORE] Loaded board '{board.id}' ({len(board.cards)} cards) from {self.path}")
        return board

    def save(self, board: Board) -> None:
        """Write the board atomically.

        Raises:
            StorageIOError: directory or file could not be written
        """
        data = board.to_dict()
        try:
            validate.validate(data, SCHEMA_NAME)
        except validate.SchemaValidationError as e:
            raise StorageIOError(self.path, f"refusing to write invalid board: {e}") from None

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".board-", suffix=".json", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(dump_board(board))
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageIOError(self.path, str(e)) from e
        logger.debug(f"[STORE] Saved board '{board.id}' ({len(board.cards)} cards) to {self.path}")
