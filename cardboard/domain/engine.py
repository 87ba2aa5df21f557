"""
Board engine: pure operations over a Board value.

Mutating operations never touch the board they are given. They work on a deep
copy and return the new Board alongside the affected Card, so callers can
compare pre/post state and only adopt the result once it has been persisted.

Failures are raised as the typed errors in cardboard.domain.errors.

Usage:
    from cardboard.domain import engine

    board = engine.new_board("My Project")
    board, card = engine.create_card(board, "Implement feature")
    board, card = engine.move_card(board, card.id, "in_progress")
"""

import copy
import re

from cardboard.domain.errors import CardNotFound, ColumnNotFound, ValidationError
from cardboard.domain.models import Board, Card, Column, utcnow

DEFAULT_COLUMNS = (
    ("todo", "To Do"),
    ("in_progress", "In Progress"),
    ("done", "Done"),
)

COLUMN_PRESETS = {
    "default": DEFAULT_COLUMNS,
    "simple": (("todo", "To Do"), ("done", "Done")),
    "development": (
        ("backlog", "Backlog"),
        ("in_progress", "In Progress"),
        ("review", "Review"),
        ("done", "Done"),
    ),
}

FALLBACK_BOARD_ID = "board"
FALLBACK_PREFIX = "CARD"
PREFIX_PATTERN = re.compile(r"^[A-Z0-9]{1,10}$")

UPDATABLE_FIELDS = ("title", "description", "assignee")


# --- board construction ---

def sanitize_id(name: str) -> str:
    """Turn a display name into a board slug ("My Project" -> "my-project")."""
    slug = name.strip().lower().replace(" ", "-").replace("_", "-")
    slug = "".join(ch for ch in slug if ch.isalnum() or ch == "-")
    return slug or FALLBACK_BOARD_ID


def generate_prefix(board_id: str) -> str:
    """First three letters of the board ID, uppercased ("my-project" -> "MYP")."""
    letters = [ch for ch in board_id if ch.isalpha()][:3]
    return "".join(letters).upper() or FALLBACK_PREFIX


def normalize_prefix(prefix: str) -> str:
    """Validate a user-supplied card ID prefix."""
    value = prefix.strip().upper()
    if not PREFIX_PATTERN.match(value):
        raise ValidationError(
            f"Invalid card ID prefix '{prefix}': use 1-10 letters or digits",
            field="prefix",
        )
    return value


def new_board(
    name: str,
    prefix: str | None = None,
    columns: tuple[tuple[str, str], ...] = DEFAULT_COLUMNS,
) -> Board:
    """Create a fresh board with the given (id, name) columns, left to right."""
    name = name.strip()
    if not name:
        raise ValidationError("Board name cannot be empty", field="name")
    board_id = sanitize_id(name)
    now = utcnow()
    return Board(
        id=board_id,
        name=name,
        card_id_prefix=normalize_prefix(prefix) if prefix else generate_prefix(board_id),
        next_card_number=1,
        columns=[Column(id=cid, name=cname, position=i) for i, (cid, cname) in enumerate(columns)],
        cards={},
        created_at=now,
        updated_at=now,
    )


def check_invariants(board: Board) -> list[str]:
    """Return a list of invariant violations (empty when the board is sound)."""
    problems = []
    if not board.columns:
        problems.append("board has no columns")

    column_ids = [c.id for c in board.columns]
    duplicates = sorted({cid for cid in column_ids if column_ids.count(cid) > 1})
    if duplicates:
        problems.append(f"duplicate column ids: {', '.join(duplicates)}")

    known = set(column_ids)
    for card in board.cards.values():
        if card.column_id not in known:
            problems.append(f"card {card.id} references unknown column '{card.column_id}'")

    if board.next_card_number < 1:
        problems.append("next_card_number must be at least 1")
    for card_id in board.cards:
        number = _sequence_number(board, card_id)
        if number is not None and number >= board.next_card_number:
            problems.append(f"card {card_id} is not below next_card_number {board.next_card_number}")
    return problems


def _sequence_number(board: Board, card_id: str) -> int | None:
    head = f"{board.card_id_prefix}-"
    if card_id.startswith(head) and card_id[len(head):].isdigit():
        return int(card_id[len(head):])
    return None


# --- lookups ---

def first_column(board: Board) -> Column:
    columns = board.sorted_columns()
    if not columns:
        raise ColumnNotFound("(none)")
    return columns[0]


def get_column(board: Board, column_id: str) -> Column:
    for column in board.columns:
        if column.id == column_id:
            return column
    raise ColumnNotFound(column_id)


def adjacent_column(board: Board, column_id: str, step: int) -> Column | None:
    """Column `step` positions away in workflow order, or None past either edge."""
    ids = board.column_ids()
    if column_id not in ids:
        raise ColumnNotFound(column_id)
    index = ids.index(column_id) + step
    if 0 <= index < len(ids):
        return get_column(board, ids[index])
    return None


def cards_in_column(board: Board, column_id: str) -> list[Card]:
    """Cards in the given column, in creation order."""
    return [c for c in board.cards.values() if c.column_id == column_id]


def resolve_card_id(board: Board, card_id: str) -> str:
    """Return the stored ID for card_id, accepting a lowercase spelling."""
    if card_id in board.cards:
        return card_id
    candidate = card_id.strip().upper()
    if candidate in board.cards:
        return candidate
    raise CardNotFound(card_id)


def find_card(board: Board, card_id: str) -> Card:
    return board.cards[resolve_card_id(board, card_id)]


# --- mutations ---

def _clean_title(title: str | None) -> str:
    value = (title or "").strip()
    if not value:
        raise ValidationError("Title cannot be empty", field="title")
    return value


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def create_card(
    board: Board,
    title: str,
    description: str | None = None,
    assignee: str | None = None,
    column_id: str | None = None,
) -> tuple[Board, Card]:
    """Create a card in column_id (default: the first column).

    The ID is minted from the board's counter, which only ever grows, so IDs of
    deleted cards are never handed out again.
    """
    title = _clean_title(title)
    target = get_column(board, column_id) if column_id is not None else first_column(board)

    new = copy.deepcopy(board)
    card_id = f"{new.card_id_prefix}-{new.next_card_number:03d}"
    new.next_card_number += 1

    now = utcnow()
    card = Card(
        id=card_id,
        title=title,
        column_id=target.id,
        description=_clean_optional(description),
        assignee=_clean_optional(assignee),
        created_at=now,
        updated_at=now,
    )
    new.cards[card_id] = card
    new.updated_at = now
    return new, card


def move_card(board: Board, card_id: str, target_column_id: str) -> tuple[Board, Card]:
    """Reassign a card to another column.

    Moving a card into the column it already occupies is a no-op: the input
    board and card are returned untouched.
    """
    card = find_card(board, card_id)
    target = get_column(board, target_column_id)
    if card.column_id == target.id:
        return board, card

    new = copy.deepcopy(board)
    moved = new.cards[card.id]
    now = utcnow()
    moved.column_id = target.id
    moved.updated_at = now
    new.updated_at = now
    return new, moved


def update_card(board: Board, card_id: str, **fields) -> tuple[Board, Card]:
    """Partially update title, description and/or assignee.

    Only supplied keywords change. None or a blank string clears description
    and assignee; the title can never become empty.
    """
    unknown = sorted(set(fields) - set(UPDATABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown card field(s): {', '.join(unknown)}")

    card = find_card(board, card_id)
    changes = {}
    if "title" in fields:
        changes["title"] = _clean_title(fields["title"])
    for name in ("description", "assignee"):
        if name in fields:
            changes[name] = _clean_optional(fields[name])

    changes = {k: v for k, v in changes.items() if getattr(card, k) != v}
    if not changes:
        return board, card

    new = copy.deepcopy(board)
    updated = new.cards[card.id]
    for name, value in changes.items():
        setattr(updated, name, value)
    now = utcnow()
    updated.updated_at = now
    new.updated_at = now
    return new, updated


def delete_card(board: Board, card_id: str) -> Board:
    """Remove a card. The counter is left alone so the ID stays retired."""
    resolved = resolve_card_id(board, card_id)
    new = copy.deepcopy(board)
    del new.cards[resolved]
    new.updated_at = utcnow()
    return new
