"""Tests for cardboard tui render helpers and the textual app."""

import asyncio

import pytest
from rich.table import Table

from cardboard.commands.tui import (
    HINTS,
    BoardApp,
    render_board,
    render_card_cell,
    render_form,
    render_panel,
)
from cardboard.workflow.session import (
    STATES,
    CardForm,
    Draft,
    FormField,
    FormMode,
    Session,
)


def press(session, *keys):
    for key in keys:
        session.handle_key(key)


@pytest.fixture
def session(cards):
    cards.create_card("Fix [bold] parser", assignee="alice")
    cards.create_card("Write docs", column_id="done")
    return Session(cards)


class TestRenderCardCell:
    """Tests for render_card_cell."""

    def test_escapes_markup(self, cards):
        """Square brackets in titles are escaped, not interpreted."""
        card = cards.create_card("Fix [bold] parser")
        cell = render_card_cell(card)
        assert "\\[bold]" in cell

    def test_assignee_and_selection(self, cards):
        card = cards.create_card("Task", assignee="bob")
        assert "@bob" in render_card_cell(card)
        assert render_card_cell(card, selected=True).startswith("[reverse]")


class TestRenderBoard:
    """Tests for render_board."""

    def test_one_column_per_board_column(self, session):
        table = render_board(session.snapshot())
        assert isinstance(table, Table)
        headers = [str(c.header) for c in table.columns]
        assert headers == ["To Do (1)", "In Progress (0)", "Done (1)"]

    def test_selected_column_highlighted(self, session):
        press(session, "right")
        table = render_board(session.snapshot())
        assert "reverse" in str(table.columns[1].header_style)
        assert "reverse" not in str(table.columns[0].header_style)

    def test_empty_board_has_placeholder_row(self, cards):
        table = render_board(Session(cards).snapshot())
        assert table.row_count == 1


class TestRenderForm:
    """Tests for render_form."""

    def test_focus_marker_and_error(self):
        form = CardForm(
            mode=FormMode.CREATE,
            column_id="todo",
            draft=Draft(description="Details"),
            focus=FormField.TITLE,
            error="Title cannot be empty",
        )
        text = render_form(form)
        assert "New card in todo" in text
        assert "> Title:" in text
        assert "Details" in text
        assert "[red]Title cannot be empty[/red]" in text

    def test_edit_title(self):
        form = CardForm(mode=FormMode.EDIT, column_id="todo", card_id="PRO-001")
        assert "Edit PRO-001" in render_form(form)


class TestRenderPanel:
    """Tests for render_panel per state."""

    def test_board_has_no_panel(self, session):
        assert render_panel(session.snapshot()) == ""

    def test_detail(self, session):
        press(session, "down", "enter")
        text = render_panel(session.snapshot())
        assert "PRO-001" in text
        assert "alice" in text
        assert "To Do" in text

    def test_confirm(self, session):
        press(session, "down", "d")
        assert "Delete PRO-001" in render_panel(session.snapshot())

    def test_move_chooser(self, session):
        press(session, "down", "m", "right")
        text = render_panel(session.snapshot())
        assert "Move PRO-001 to:" in text
        assert "[reverse] In Progress [/reverse]" in text

    def test_every_state_has_a_hint(self):
        assert set(HINTS) == set(STATES)


class TestBoardApp:
    """Drive BoardApp through textual's Pilot with real key names."""

    def test_create_card_through_keys(self, cards):
        """c, typed text and enter x3 create a card and close the form panel."""
        app = BoardApp(Session(cards))

        async def scenario():
            async with app.run_test() as pilot:
                await pilot.press("c")
                assert app.session.state == "card_form"
                assert app.query_one("#panel").display
                await pilot.press("f", "i", "x", "space", "i", "t")
                await pilot.press("enter", "enter", "enter")
                assert app.session.state == "board"
                assert not app.query_one("#panel").display

        asyncio.run(scenario())
        assert [c.title for c in cards.board.cards.values()] == ["fix it"]

    def test_question_mark_shows_help(self, cards):
        app = BoardApp(Session(cards))

        async def scenario():
            async with app.run_test() as pilot:
                assert not app.query_one("#help").display
                await pilot.press("question_mark")
                assert app.session.help_visible
                assert app.query_one("#help").display
                await pilot.press("escape")
                assert not app.query_one("#help").display

        asyncio.run(scenario())

    def test_question_mark_typed_in_form(self, cards):
        app = BoardApp(Session(cards))

        async def scenario():
            async with app.run_test() as pilot:
                await pilot.press("c", "question_mark")
                assert not app.session.help_visible
                assert app.session.view.draft.title == "?"

        asyncio.run(scenario())

    def test_q_exits(self, cards):
        app = BoardApp(Session(cards))

        async def scenario():
            async with app.run_test() as pilot:
                await pilot.press("q")
                assert app.session.should_quit
                assert app.return_code == 0

        asyncio.run(scenario())
