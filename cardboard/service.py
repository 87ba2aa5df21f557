"""
Board and card services.

CardService holds the loaded board, runs engine operations against it and
writes the result through to storage after every successful mutation. The
held board is only replaced once the save has succeeded, so an engine error
or a failed write leaves both memory and disk at the previous state.

Usage:
    from cardboard.service import BoardService

    cards = BoardService(base_path).open_card_service()
    card = cards.create_card("Implement feature", column_id="todo")
    cards.move_card(card.id, "in_progress")
"""

import logging
from pathlib import Path

from cardboard.domain import engine
from cardboard.domain.errors import AlreadyInitialized
from cardboard.domain.models import Board, Card, Column
from cardboard.lib.storage import BoardStore

logger = logging.getLogger(__name__)


class BoardService:
    """Board lifecycle for one directory: initialize, load, open."""

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)
        self.store = BoardStore(self.base_path)

    def exists(self) -> bool:
        return self.store.exists()

    def initialize(
        self,
        name: str | None = None,
        prefix: str | None = None,
        columns: tuple[tuple[str, str], ...] = engine.DEFAULT_COLUMNS,
    ) -> Board:
        """Create and persist a fresh board.

        The name defaults to the directory name (see default_name).

        Raises:
            AlreadyInitialized: a board file already exists
            ValidationError: empty name or bad prefix
        """
        if self.store.exists():
            raise AlreadyInitialized(self.store.path)
        board = engine.new_board(name or self.default_name(), prefix=prefix, columns=columns)
        self.store.save(board)
        logger.info(f"[SERVICE] Initialized board '{board.id}' at {self.store.path}")
        return board

    def default_name(self) -> str:
        return self.base_path.resolve().name or engine.FALLBACK_BOARD_ID

    def load(self) -> Board:
        return self.store.load()

    def open_card_service(self) -> "CardService":
        """Load the board once and wrap it in a CardService."""
        return CardService(self.store, self.store.load())


class CardService:
    """Card operations over a loaded board with write-through persistence."""

    def __init__(self, store: BoardStore, board: Board):
        self.store = store
        self._board = board

    @property
    def board(self) -> Board:
        return self._board

    def _commit(self, new_board: Board) -> None:
        if new_board is self._board:
            return
        self.store.save(new_board)
        self._board = new_board

    # --- queries ---

    def columns(self) -> list[Column]:
        return self._board.sorted_columns()

    def get_column(self, column_id: str) -> Column:
        return engine.get_column(self._board, column_id)

    def find_card(self, card_id: str) -> Card:
        return engine.find_card(self._board, card_id)

    def cards_in_column(self, column_id: str) -> list[Card]:
        return engine.cards_in_column(self._board, column_id)

    def list_cards(self, column: str | None = None, assignee: str | None = None) -> tuple[Card, ...]:
        """Cards ordered by column position then creation, filtered by equality.

        Raises:
            ColumnNotFound: column filter names an unknown column
        """
        if column is not None:
            engine.get_column(self._board, column)
        result = []
        for col in self._board.sorted_columns():
            if column is not None and col.id != column:
                continue
            for card in engine.cards_in_column(self._board, col.id):
                if assignee is not None and card.assignee != assignee:
                    continue
                result.append(card)
        return tuple(result)

    # --- mutations ---

    def create_card(
        self,
        title: str,
        description: str | None = None,
        assignee: str | None = None,
        column_id: str | None = None,
    ) -> Card:
        new_board, card = engine.create_card(
            self._board, title, description=description, assignee=assignee, column_id=column_id
        )
        self._commit(new_board)
        logger.info(f"[SERVICE] Created {card.id} in {card.column_id}")
        return card

    def move_card(self, card_id: str, column_id: str) -> Card:
        before = self.find_card(card_id).column_id
        new_board, card = engine.move_card(self._board, card_id, column_id)
        self._commit(new_board)
        if before != card.column_id:
            logger.info(f"[SERVICE] Moved {card.id}: {before} -> {card.column_id}")
        return card

    def update_card(self, card_id: str, **fields) -> Card:
        new_board, card = engine.update_card(self._board, card_id, **fields)
        self._commit(new_board)
        logger.info(f"[SERVICE] Updated {card.id} ({', '.join(sorted(fields)) or 'no fields'})")
        return card

    def delete_card(self, card_id: str) -> Card:
        """Delete a card and return the removed card."""
        card = self.find_card(card_id)
        self._commit(engine.delete_card(self._board, card.id))
        logger.info(f"[SERVICE] Deleted {card.id}")
        return card
