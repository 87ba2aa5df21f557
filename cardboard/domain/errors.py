"""Error taxonomy for board operations.

Every failure the engine, the services or the storage gateway can report is a
subclass of CardboardError. The CLI maps `exit_code` to the process exit status;
the interactive session maps the type to an inline form error or a notice.
"""

from pathlib import Path

EXIT_GENERAL = 1
EXIT_BOARD = 2
EXIT_INVALID_INPUT = 3


class CardboardError(Exception):
    """Base class for all reported board failures."""

    exit_code = EXIT_GENERAL


class ValidationError(CardboardError):
    """A field value is empty or otherwise invalid."""

    exit_code = EXIT_INVALID_INPUT

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class CardNotFound(CardboardError):
    """No card with the given ID exists on the board."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(f"Card not found: {card_id}")


class ColumnNotFound(CardboardError):
    """No column with the given ID exists on the board."""

    def __init__(self, column_id: str):
        self.column_id = column_id
        super().__init__(f"Column not found: {column_id}")


class BoardNotFound(CardboardError):
    """The board file does not exist."""

    exit_code = EXIT_BOARD

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"No board found at {path}. Run 'cardboard init' to create one.")


class AlreadyInitialized(CardboardError):
    """A board file already exists where a new one was requested."""

    exit_code = EXIT_BOARD

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Board already initialized at {path}. Use 'cardboard info' to view it.")


class FormatError(CardboardError):
    """The board file is not valid JSON or does not match the board schema."""

    exit_code = EXIT_BOARD

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"Corrupt board file {path}: {message}")


class StorageIOError(CardboardError):
    """Reading or writing the board file failed."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"I/O error on {path}: {message}")
