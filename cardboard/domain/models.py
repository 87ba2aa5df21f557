"""
Board, column and card entities.

A Board owns its columns (ordered by position) and its cards (keyed by card ID,
insertion ordered). Cards reference their column by ID only, so the whole tree
serializes to plain JSON without cycles.

On-disk shape (see schemas/board.schema.json):

    {
      "id": "myproject", "name": "My Project", "card_id_prefix": "MYP",
      "next_card_number": 4,
      "columns": [{"id": "todo", "name": "To Do", "position": 0}, ...],
      "cards": [{"id": "MYP-001", "title": "...", "description": null,
                 "assignee": null, "column_id": "todo",
                 "created_at": "...", "updated_at": "..."}, ...],
      "created_at": "...", "updated_at": "..."
    }
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Column:
    """A workflow stage. Lower position renders further left."""
    id: str
    name: str
    position: int

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "position": self.position}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Column":
        return cls(id=data["id"], name=data["name"], position=int(data["position"]))


@dataclass
class Card:
    """A single unit of work with a permanent ID (e.g. PRJ-001)."""
    id: str
    title: str
    column_id: str
    description: str | None = None
    assignee: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "assignee": self.assignee,
            "column_id": self.column_id,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Card":
        return cls(
            id=data["id"],
            title=data["title"],
            column_id=data["column_id"],
            description=data.get("description"),
            assignee=data.get("assignee"),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )


@dataclass
class Board:
    """The full persisted kanban state for one project."""
    id: str
    name: str
    card_id_prefix: str
    next_card_number: int = 1
    columns: list[Column] = field(default_factory=list)
    cards: dict[str, Card] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def sorted_columns(self) -> list[Column]:
        """Columns in workflow order (stable for equal positions)."""
        return sorted(self.columns, key=lambda c: c.position)

    def column_ids(self) -> list[str]:
        return [c.id for c in self.sorted_columns()]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "card_id_prefix": self.card_id_prefix,
            "next_card_number": self.next_card_number,
            "columns": [c.to_dict() for c in self.columns],
            "cards": [c.to_dict() for c in self.cards.values()],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Board":
        """Build a Board from its serialized form.

        Raises KeyError/ValueError/TypeError on malformed input; the storage
        layer validates against the schema first and wraps anything left as a
        FormatError.
        """
        cards = [Card.from_dict(c) for c in data.get("cards", [])]
        return cls(
            id=data["id"],
            name=data["name"],
            card_id_prefix=data["card_id_prefix"],
            next_card_number=int(data["next_card_number"]),
            columns=[Column.from_dict(c) for c in data["columns"]],
            cards={c.id: c for c in cards},
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )
