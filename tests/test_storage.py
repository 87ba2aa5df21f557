"""Tests for cardboard.lib.storage."""

import json
from unittest.mock import patch

import pytest

from cardboard.domain import engine
from cardboard.domain.errors import BoardNotFound, FormatError, StorageIOError
from cardboard.lib.storage import BoardStore, board_path, find_board_path


@pytest.fixture
def store(tmp_path):
    return BoardStore(tmp_path)


@pytest.fixture
def board():
    board = engine.new_board("Project")
    board, _ = engine.create_card(board, "One", description="First", assignee="alice")
    board, _ = engine.create_card(board, "Two", column_id="done")
    return board


class TestBoardStore:
    """Tests for load/save."""

    def test_path_layout(self, store, tmp_path):
        """The board lives in .cardboard/board.json under the base path."""
        assert store.path == tmp_path / ".cardboard" / "board.json"
        assert board_path(tmp_path) == store.path

    def test_round_trip(self, store, board):
        """Save then load reproduces the same board."""
        store.save(board)
        assert store.load() == board

    def test_load_save_preserves_file_content(self, store, board):
        """Loading and re-saving an unmodified board rewrites identical content."""
        store.save(board)
        before = store.path.read_text()
        store.save(store.load())
        assert store.path.read_text() == before

    def test_file_shape(self, store, board):
        """Cards are a list; optional fields are explicit nulls."""
        store.save(board)
        data = json.loads(store.path.read_text())
        assert [c["id"] for c in data["cards"]] == ["PRO-001", "PRO-002"]
        assert data["cards"][1]["assignee"] is None
        assert data["next_card_number"] == 3

    def test_missing_file(self, store):
        """No board file raises BoardNotFound."""
        assert not store.exists()
        with pytest.raises(BoardNotFound):
            store.load()

    def test_invalid_json(self, store):
        """Unparseable JSON raises FormatError."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json")
        with pytest.raises(FormatError) as exc:
            store.load()
        assert "invalid JSON" in str(exc.value)

    def test_schema_violation(self, store, board):
        """A card with an empty title raises FormatError naming the path."""
        store.save(board)
        data = json.loads(store.path.read_text())
        data["cards"][0]["title"] = ""
        store.path.write_text(json.dumps(data))
        with pytest.raises(FormatError) as exc:
            store.load()
        assert "cards.0.title" in str(exc.value)

    def test_unknown_column_reference(self, store, board):
        """A card referencing a missing column fails the invariant check."""
        store.save(board)
        data = json.loads(store.path.read_text())
        data["cards"][0]["column_id"] = "archive"
        store.path.write_text(json.dumps(data))
        with pytest.raises(FormatError):
            store.load()

    def test_duplicate_card_ids(self, store, board):
        """Two cards with the same ID are rejected."""
        store.save(board)
        data = json.loads(store.path.read_text())
        data["cards"][1]["id"] = data["cards"][0]["id"]
        store.path.write_text(json.dumps(data))
        with pytest.raises(FormatError) as exc:
            store.load()
        assert "duplicate" in str(exc.value)

    def test_failed_write_keeps_previous_file(self, store, board):
        """A failing replace raises StorageIOError and leaves no temp file behind."""
        store.save(board)
        before = store.path.read_text()
        new, _ = engine.create_card(board, "Three")
        with patch("cardboard.lib.storage.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(StorageIOError) as exc:
                store.save(new)
        assert "disk full" in str(exc.value)
        assert store.path.read_text() == before
        assert [p.name for p in store.path.parent.iterdir()] == ["board.json"]


class TestFindBoardPath:
    """Tests for find_board_path."""

    def test_finds_in_parent(self, tmp_path, board):
        """A board in an ancestor directory is found."""
        BoardStore(tmp_path).save(board)
        nested = tmp_path / "src" / "pkg"
        nested.mkdir(parents=True)
        assert find_board_path(nested) == board_path(tmp_path).resolve()

    def test_none_when_absent(self, tmp_path):
        nested = tmp_path / "a"
        nested.mkdir()
        # tmp_path lives under the system temp dir, which has no board
        assert find_board_path(nested) is None
