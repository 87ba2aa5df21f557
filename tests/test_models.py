"""Tests for cardboard.domain.models."""

from datetime import datetime, timezone

from cardboard.domain.models import Board, Card, Column


def _card(**overrides):
    data = {
        "id": "PRJ-001",
        "title": "Implement feature",
        "column_id": "todo",
        "created_at": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    }
    data.update(overrides)
    return Card(**data)


class TestCard:
    """Tests for Card serialization."""

    def test_optional_fields_serialize_as_null(self):
        """Missing description and assignee are written as null, not omitted."""
        data = _card().to_dict()
        assert data["description"] is None
        assert data["assignee"] is None

    def test_timestamps_are_iso8601(self):
        """Timestamps round-trip through ISO-8601 strings."""
        card = _card()
        data = card.to_dict()
        assert data["created_at"] == "2024-01-02T03:04:05+00:00"
        assert Card.from_dict(data) == card

    def test_from_dict_tolerates_missing_optionals(self):
        """Description and assignee keys may be absent."""
        card = Card.from_dict({
            "id": "PRJ-002",
            "title": "Write docs",
            "column_id": "done",
            "created_at": "2024-01-02T03:04:05+00:00",
            "updated_at": "2024-01-02T03:04:05+00:00",
        })
        assert card.description is None
        assert card.assignee is None


class TestBoard:
    """Tests for Board helpers and serialization."""

    def test_sorted_columns_uses_position(self):
        """Columns are returned in position order regardless of storage order."""
        board = Board(
            id="b",
            name="B",
            card_id_prefix="B",
            columns=[Column("done", "Done", 2), Column("todo", "To Do", 0), Column("doing", "Doing", 1)],
        )
        assert board.column_ids() == ["todo", "doing", "done"]

    def test_cards_keep_insertion_order(self):
        """Cards serialize as a list in insertion order."""
        board = Board(id="b", name="B", card_id_prefix="PRJ", next_card_number=3,
                      columns=[Column("todo", "To Do", 0)])
        board.cards["PRJ-002"] = _card(id="PRJ-002")
        board.cards["PRJ-001"] = _card(id="PRJ-001")
        data = board.to_dict()
        assert [c["id"] for c in data["cards"]] == ["PRJ-002", "PRJ-001"]
        assert list(Board.from_dict(data).cards) == ["PRJ-002", "PRJ-001"]

    def test_round_trip(self):
        """to_dict/from_dict reproduces an equal board."""
        board = Board(id="b", name="B", card_id_prefix="PRJ", next_card_number=2,
                      columns=[Column("todo", "To Do", 0)])
        board.cards["PRJ-001"] = _card(assignee="alice", description="Details")
        assert Board.from_dict(board.to_dict()) == board
