"""Interactive session state machine.

Drives the terminal board from discrete key events. Each call to
Session.handle_key() runs to completion, including any CardService call and
its write-through save, before the next key is accepted.

The mode lives in a `transitions` Machine (explicit triggers, no automatic
to_* transitions). The data for the current mode is a frozen view object in
`session.view`, swapped in by the machine's before_state_change callback, so
the mode name and its data always agree:

    board           BoardView(column_index, card_index)
    card_detail     CardDetail(card_id)
    card_form       CardForm(mode, column_id, draft, focus, card_id, error)
    confirm_delete  ConfirmDelete(card_id, return_to)
    move_card       MoveCard(card_id, column_index, return_to)

The help overlay is a flag on top of whichever mode is current.

Usage:
    session = Session(card_service)
    session.handle_key("c")
    for ch in "Write docs":
        session.handle_key(ch)
    session.handle_key("enter")
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union

from transitions import Machine

from cardboard.domain import engine
from cardboard.domain.errors import (
    CardNotFound,
    ColumnNotFound,
    StorageIOError,
    ValidationError,
)
from cardboard.domain.models import Card, Column
from cardboard.service import CardService

logger = logging.getLogger(__name__)


class FormField(Enum):
    TITLE = "title"
    DESCRIPTION = "description"
    ASSIGNEE = "assignee"


FORM_FIELDS = (FormField.TITLE, FormField.DESCRIPTION, FormField.ASSIGNEE)


class FormMode(Enum):
    CREATE = "create"
    EDIT = "edit"


@dataclass(frozen=True)
class Draft:
    """Uncommitted form input."""
    title: str = ""
    description: str = ""
    assignee: str = ""

    def get(self, form_field: FormField) -> str:
        return getattr(self, form_field.value)

    def with_value(self, form_field: FormField, value: str) -> "Draft":
        return replace(self, **{form_field.value: value})

    @classmethod
    def from_card(cls, card: Card) -> "Draft":
        return cls(
            title=card.title,
            description=card.description or "",
            assignee=card.assignee or "",
        )


@dataclass(frozen=True)
class BoardView:
    column_index: int = 0
    card_index: int | None = None


@dataclass(frozen=True)
class CardDetail:
    card_id: str


@dataclass(frozen=True)
class CardForm:
    mode: FormMode
    column_id: str
    draft: Draft = field(default_factory=Draft)
    focus: FormField = FormField.TITLE
    card_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class ConfirmDelete:
    card_id: str
    return_to: Union[BoardView, CardDetail]


@dataclass(frozen=True)
class MoveCard:
    card_id: str
    column_index: int
    return_to: Union[BoardView, CardDetail]


View = Union[BoardView, CardDetail, CardForm, ConfirmDelete, MoveCard]


@dataclass(frozen=True)
class Notice:
    """One-shot message for the renderer (severity uses textual's names)."""
    message: str
    severity: str = "information"


STATES = ["board", "card_detail", "card_form", "confirm_delete", "move_card"]

VIEW_TYPES = {
    "board": BoardView,
    "card_detail": CardDetail,
    "card_form": CardForm,
    "confirm_delete": ConfirmDelete,
    "move_card": MoveCard,
}

TRANSITIONS = [
    {"trigger": "show_board", "source": ["card_detail", "card_form", "confirm_delete", "move_card"], "dest": "board"},
    {"trigger": "show_card", "source": ["board", "confirm_delete", "move_card"], "dest": "card_detail"},
    {"trigger": "start_form", "source": ["board", "card_detail"], "dest": "card_form"},
    {"trigger": "request_delete", "source": ["board", "card_detail"], "dest": "confirm_delete"},
    {"trigger": "start_move", "source": ["board", "card_detail"], "dest": "move_card"},
]

# Vim-style aliases, applied outside the form (where letters are text)
NAV_ALIASES = {"h": "left", "j": "down", "k": "up", "l": "right"}
# textual names the "?" key "question_mark"
HELP_KEYS = ("question_mark", "?", "f1")
FORM_HELP_KEYS = ("f1",)


@dataclass(frozen=True)
class ColumnSnapshot:
    column: Column
    cards: tuple[Card, ...]


@dataclass(frozen=True)
class Snapshot:
    """Read-only picture of the session for the renderer."""
    state: str
    view: View
    board_view: BoardView
    help_visible: bool
    notice: Notice | None
    board_name: str
    columns: tuple[ColumnSnapshot, ...]
    card: Card | None


class Session:
    """Keyed-input controller over a CardService."""

    def __init__(self, cards: CardService):
        self.cards = cards
        self.view: View = BoardView()
        self.board_view = BoardView()
        self.help_visible = False
        self.notice: Notice | None = None
        self.should_quit = False

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial="board",
            auto_transitions=False,
            send_event=True,
            before_state_change="_adopt_view",
            after_state_change="_log_transition",
        )
        self._set_board_view(self._clamp(BoardView()))

    # --- machine callbacks ---

    def _adopt_view(self, event) -> None:
        """Install the view passed with the trigger before the state flips."""
        view = event.kwargs.get("view")
        expected = VIEW_TYPES[event.transition.dest]
        if not isinstance(view, expected):
            raise TypeError(
                f"{event.event.name} needs a {expected.__name__} view, got {type(view).__name__}"
            )
        self.view = view
        if isinstance(view, BoardView):
            self.board_view = view

    def _log_transition(self, event) -> None:
        logger.debug(
            f"[SESSION] {event.transition.source} -> {event.transition.dest} ({event.event.name})"
        )

    # --- board helpers ---

    def _columns(self) -> list[Column]:
        return self.cards.columns()

    def _column_cards(self, column_index: int) -> list[Card]:
        return self.cards.cards_in_column(self._columns()[column_index].id)

    def _clamp(self, view: BoardView) -> BoardView:
        """Pull a board view back inside the current columns and cards."""
        column_index = min(max(view.column_index, 0), len(self._columns()) - 1)
        count = len(self._column_cards(column_index))
        card_index = view.card_index
        if count == 0 or card_index is None:
            card_index = None
        else:
            card_index = min(max(card_index, 0), count - 1)
        return BoardView(column_index, card_index)

    def _focus_card(self, card_id: str) -> BoardView:
        """Board view with the given card selected (or the last view, clamped)."""
        for ci, column in enumerate(self._columns()):
            for idx, card in enumerate(self.cards.cards_in_column(column.id)):
                if card.id == card_id:
                    return BoardView(ci, idx)
        return self._clamp(self.board_view)

    def _set_board_view(self, view: BoardView) -> None:
        self.view = view
        self.board_view = view

    def selected_card(self) -> Card | None:
        view = self.board_view
        if view.card_index is None:
            return None
        cards = self._column_cards(view.column_index)
        if 0 <= view.card_index < len(cards):
            return cards[view.card_index]
        return None

    def _return_to_board(self, view: BoardView, notice: Notice | None = None) -> None:
        view = self._clamp(view)
        if self.state == "board":
            self._set_board_view(view)
        else:
            self.show_board(view=view)
        if notice is not None:
            self.notice = notice

    def _restore(self, target: Union[BoardView, CardDetail]) -> None:
        if isinstance(target, CardDetail):
            self.show_card(view=target)
        else:
            self._return_to_board(target)

    def _lost_card(self, error: Exception) -> None:
        """The card or column changed underneath the session: back to the board."""
        logger.info(f"[SESSION] {error}")
        self._return_to_board(self.board_view, Notice(str(error), "warning"))

    # --- entry point ---

    def handle_key(self, key: str, character: str | None = None) -> None:
        """Process one key event.

        Args:
            key: textual-style key name ("enter", "escape", "up", "a", ...)
            character: the printable character for the key, if any; defaults
                to `key` for single-character key names
        """
        if character is None and len(key) == 1:
            character = key
        self.notice = None

        help_keys = FORM_HELP_KEYS if self.state == "card_form" else HELP_KEYS
        if key in help_keys:
            self.help_visible = not self.help_visible
            return
        if self.help_visible:
            if key == "escape":
                self.help_visible = False
            return

        handler = getattr(self, f"_on_{self.state}_key")
        handler(key, character)

    # --- board ---

    def _on_board_key(self, key: str, character: str | None) -> None:
        key = NAV_ALIASES.get(key, key)
        view = self.board_view
        cards = self._column_cards(view.column_index)
        selected = self.selected_card()

        if key in ("left", "right"):
            step = -1 if key == "left" else 1
            target = self._clamp(BoardView(view.column_index + step, None))
            if target.column_index != view.column_index:
                self._set_board_view(target)
        elif key == "up":
            if cards:
                idx = len(cards) - 1 if view.card_index is None else max(0, view.card_index - 1)
                self._set_board_view(BoardView(view.column_index, idx))
        elif key == "down":
            if cards:
                idx = 0 if view.card_index is None else min(len(cards) - 1, view.card_index + 1)
                self._set_board_view(BoardView(view.column_index, idx))
        elif key == "enter":
            if selected:
                self.show_card(view=CardDetail(selected.id))
            elif cards:
                self._set_board_view(BoardView(view.column_index, 0))
        elif key == "escape":
            self._set_board_view(BoardView(view.column_index, None))
        elif key == "c":
            column = self._columns()[view.column_index]
            self.start_form(view=CardForm(mode=FormMode.CREATE, column_id=column.id))
        elif key in ("H", "L", "shift+left", "shift+right"):
            if selected:
                self._quick_move(selected, -1 if key in ("H", "shift+left") else 1)
        elif key in ("e", "d", "m"):
            if selected:
                self._open_card_action(key, selected, view)
        elif key == "q":
            self.should_quit = True

    def _open_card_action(self, key: str, card: Card, origin: Union[BoardView, CardDetail]) -> None:
        if key == "e":
            self.start_form(view=CardForm(
                mode=FormMode.EDIT,
                column_id=card.column_id,
                draft=Draft.from_card(card),
                card_id=card.id,
            ))
        elif key == "d":
            self.request_delete(view=ConfirmDelete(card_id=card.id, return_to=origin))
        elif key == "m":
            column_index = self.cards.board.column_ids().index(card.column_id)
            self.start_move(view=MoveCard(card_id=card.id, column_index=column_index, return_to=origin))

    def _quick_move(self, card: Card, step: int) -> None:
        target = engine.adjacent_column(self.cards.board, card.column_id, step)
        if target is None:
            return
        try:
            self.cards.move_card(card.id, target.id)
        except StorageIOError as e:
            self.notice = Notice(str(e), "error")
            return
        self._set_board_view(self._focus_card(card.id))
        self.notice = Notice(f"Moved {card.id} to {target.name}")

    # --- card detail ---

    def _on_card_detail_key(self, key: str, character: str | None) -> None:
        try:
            card = self.cards.find_card(self.view.card_id)
        except CardNotFound as e:
            self._lost_card(e)
            return

        if key in ("escape", "q"):
            self._return_to_board(self._focus_card(card.id))
        elif key in ("e", "d", "m"):
            self._open_card_action(key, card, self.view)

    # --- create / edit form ---

    def _on_card_form_key(self, key: str, character: str | None) -> None:
        form = self.view
        position = FORM_FIELDS.index(form.focus)

        if key == "escape":
            self._return_to_board(self.board_view)
        elif key in ("tab", "down"):
            self.view = replace(form, focus=FORM_FIELDS[min(position + 1, len(FORM_FIELDS) - 1)])
        elif key in ("shift+tab", "up"):
            self.view = replace(form, focus=FORM_FIELDS[max(position - 1, 0)])
        elif key == "enter":
            if form.focus is FORM_FIELDS[-1]:
                self._submit_form(form)
            else:
                self.view = replace(form, focus=FORM_FIELDS[position + 1])
        elif key == "backspace":
            value = form.draft.get(form.focus)
            self.view = replace(form, draft=form.draft.with_value(form.focus, value[:-1]))
        elif character and len(character) == 1 and character.isprintable():
            value = form.draft.get(form.focus) + character
            self.view = replace(form, draft=form.draft.with_value(form.focus, value))

    def _submit_form(self, form: CardForm) -> None:
        draft = form.draft
        try:
            if form.mode is FormMode.CREATE:
                card = self.cards.create_card(
                    draft.title,
                    description=draft.description,
                    assignee=draft.assignee,
                    column_id=form.column_id,
                )
                message = f"Created {card.id}"
            else:
                card = self.cards.update_card(
                    form.card_id,
                    title=draft.title,
                    description=draft.description,
                    assignee=draft.assignee,
                )
                message = f"Updated {card.id}"
        except ValidationError as e:
            self.view = replace(form, focus=FormField.TITLE, error=str(e))
            return
        except (CardNotFound, ColumnNotFound) as e:
            self._lost_card(e)
            return
        except StorageIOError as e:
            self.view = replace(form, error=str(e))
            self.notice = Notice(str(e), "error")
            return

        self._return_to_board(self._focus_card(card.id), Notice(message))

    # --- delete confirmation ---

    def _on_confirm_delete_key(self, key: str, character: str | None) -> None:
        confirm = self.view
        if key in ("y", "Y"):
            base = confirm.return_to if isinstance(confirm.return_to, BoardView) else self.board_view
            try:
                card = self.cards.delete_card(confirm.card_id)
                notice = Notice(f"Deleted {card.id}")
            except CardNotFound:
                notice = Notice(f"{confirm.card_id} was already deleted")
            except StorageIOError as e:
                notice = Notice(str(e), "error")
            self._return_to_board(base, notice)
        elif key in ("n", "N", "escape"):
            self._restore(confirm.return_to)

    # --- move chooser ---

    def _on_move_card_key(self, key: str, character: str | None) -> None:
        key = NAV_ALIASES.get(key, key)
        move = self.view
        columns = self._columns()

        if key in ("left", "right"):
            step = -1 if key == "left" else 1
            index = min(max(move.column_index + step, 0), len(columns) - 1)
            self.view = replace(move, column_index=index)
        elif key == "enter":
            target = columns[move.column_index]
            try:
                card = self.cards.move_card(move.card_id, target.id)
            except (CardNotFound, ColumnNotFound) as e:
                self._lost_card(e)
                return
            except StorageIOError as e:
                self.notice = Notice(str(e), "error")
                self._restore(move.return_to)
                return
            if isinstance(move.return_to, CardDetail):
                self.show_card(view=CardDetail(card.id))
            else:
                self._return_to_board(self._focus_card(card.id))
            self.notice = Notice(f"Moved {card.id} to {target.name}")
        elif key == "escape":
            self._restore(move.return_to)

    # --- renderer support ---

    def snapshot(self) -> Snapshot:
        card = None
        card_id = getattr(self.view, "card_id", None)
        if card_id is not None:
            try:
                card = self.cards.find_card(card_id)
            except CardNotFound:
                card = None
        return Snapshot(
            state=self.state,
            view=self.view,
            board_view=self.board_view,
            help_visible=self.help_visible,
            notice=self.notice,
            board_name=self.cards.board.name,
            columns=tuple(
                ColumnSnapshot(column=c, cards=tuple(self.cards.cards_in_column(c.id)))
                for c in self._columns()
            ),
            card=card,
        )
