"""Board domain: entities, error taxonomy and the pure board engine.

The engine functions live in cardboard.domain.engine and are imported as a
module (`from cardboard.domain import engine`) so call sites read
`engine.create_card(...)`.
"""

from cardboard.domain.errors import (
    CardboardError,
    ValidationError,
    CardNotFound,
    ColumnNotFound,
    BoardNotFound,
    AlreadyInitialized,
    FormatError,
    StorageIOError,
)
from cardboard.domain.models import (
    Board,
    Card,
    Column,
    utcnow,
)

__all__ = [
    "CardboardError",
    "ValidationError",
    "CardNotFound",
    "ColumnNotFound",
    "BoardNotFound",
    "AlreadyInitialized",
    "FormatError",
    "StorageIOError",
    "Board",
    "Card",
    "Column",
    "utcnow",
]
