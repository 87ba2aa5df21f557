"""
cardboard tui - interactive board.

A textual app that paints the Session and forwards every key to it. All
behaviour lives in cardboard.workflow.session; this module only turns a
Session snapshot into Rich markup.
"""

import logging

from rich import box
from rich.markup import escape
from rich.table import Table
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Container
from textual.widgets import Header, Static

from cardboard.domain.models import Card
from cardboard.lib.config import Settings
from cardboard.service import BoardService
from cardboard.workflow.session import (
    FORM_FIELDS,
    CardForm,
    ConfirmDelete,
    FormField,
    FormMode,
    MoveCard,
    Session,
    Snapshot,
)

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

FIELD_LABELS = {
    FormField.TITLE: "Title",
    FormField.DESCRIPTION: "Description",
    FormField.ASSIGNEE: "Assignee",
}

HINTS = {
    "board": "[c]reate  [enter] open  [e]dit  [m]ove  [d]elete  [H/L] shift card  [?] help  [q]uit",
    "card_detail": "[e]dit  [m]ove  [d]elete  [esc] back  [?] help",
    "card_form": "type to edit  [tab/enter] next field  [enter on Assignee] save  [esc] cancel  [F1] help",
    "confirm_delete": "[y]es  [n]o  [esc] cancel",
    "move_card": "[left/right] choose column  [enter] move  [esc] cancel",
}

HELP_TEXT = """[bold]Keys[/bold]

[bold]Board[/bold]
  left/right, h/l    select column
  up/down, k/j       select card
  enter              open selected card (selects the first if none)
  esc                clear card selection
  c                  create card in selected column
  e / m / d          edit / move / delete selected card
  H / L              move selected card one column left / right
  q                  quit

[bold]Card form[/bold]
  any character      types into the focused field
  backspace          delete last character
  tab/down, enter    next field
  shift+tab/up       previous field
  enter on Assignee  save
  esc                discard and return

[bold]Confirm delete[/bold]
  y                  delete
  n / esc            keep the card

? (F1 in forms) toggles this help, esc closes it."""


def render_card_cell(card: Card, selected: bool = False) -> str:
    """One card as it appears in a board column."""
    text = f"[bold]{escape(card.id)}[/bold] {escape(card.title)}"
    if card.assignee:
        text += f"\n  [dim]@{escape(card.assignee)}[/dim]"
    if selected:
        return f"[reverse]{text}[/reverse]"
    return text


def render_board(snapshot: Snapshot) -> Table:
    """Columns side by side with the selected column and card highlighted."""
    selection = snapshot.board_view
    table = Table(expand=True, box=box.SIMPLE_HEAVY, show_edge=False)
    for ci, col in enumerate(snapshot.columns):
        header = f"{col.column.name} ({len(col.cards)})"
        style = "bold reverse" if ci == selection.column_index else "bold"
        table.add_column(escape(header), header_style=style, ratio=1)

    rows = max((len(col.cards) for col in snapshot.columns), default=0)
    for r in range(max(rows, 1)):
        cells = []
        for ci, col in enumerate(snapshot.columns):
            if r < len(col.cards):
                selected = ci == selection.column_index and r == selection.card_index
                cells.append(render_card_cell(col.cards[r], selected))
            elif r == 0:
                cells.append("[dim](empty)[/dim]")
            else:
                cells.append("")
        table.add_row(*cells)
    return table


def _column_name(snapshot: Snapshot, column_id: str) -> str:
    for col in snapshot.columns:
        if col.column.id == column_id:
            return col.column.name
    return column_id


def render_detail(snapshot: Snapshot) -> str:
    card = snapshot.card
    if card is None:
        return "[dim]Card no longer exists[/dim]"
    lines = [
        f"[bold]{escape(card.id)}[/bold]  {escape(card.title)}",
        f"  Column:      {escape(_column_name(snapshot, card.column_id))}",
        f"  Assignee:    {escape(card.assignee) if card.assignee else '[dim]-[/dim]'}",
        f"  Created:     {card.created_at.strftime(TIMESTAMP_FORMAT)}",
        f"  Updated:     {card.updated_at.strftime(TIMESTAMP_FORMAT)}",
        "",
        escape(card.description) if card.description else "[dim]No description[/dim]",
    ]
    return "\n".join(lines)


def render_form(form: CardForm) -> str:
    """The draft with the focused field marked and any error underneath."""
    if form.mode is FormMode.CREATE:
        title = f"New card in {escape(form.column_id)}"
    else:
        title = f"Edit {escape(form.card_id or '')}"
    lines = [f"[bold]{title}[/bold]", ""]
    for form_field in FORM_FIELDS:
        label = f"{FIELD_LABELS[form_field]}:".ljust(13)
        value = escape(form.draft.get(form_field))
        if form_field is form.focus:
            lines.append(f"[bold]> {label}[/bold]{value}[blink]_[/blink]")
        else:
            lines.append(f"  {label}{value}")
    if form.error:
        lines.append("")
        lines.append(f"[red]{escape(form.error)}[/red]")
    return "\n".join(lines)


def render_confirm(confirm: ConfirmDelete, snapshot: Snapshot) -> str:
    title = f" ({escape(snapshot.card.title)})" if snapshot.card else ""
    return f"[bold yellow]Delete {escape(confirm.card_id)}{title}?[/bold yellow]  [y]es / [n]o"


def render_move(move: MoveCard, snapshot: Snapshot) -> str:
    choices = []
    for ci, col in enumerate(snapshot.columns):
        name = escape(col.column.name)
        choices.append(f"[reverse] {name} [/reverse]" if ci == move.column_index else f" {name} ")
    return f"[bold]Move {escape(move.card_id)} to:[/bold] " + " ".join(choices)


def render_panel(snapshot: Snapshot) -> str:
    """Lower panel content for the current state."""
    view = snapshot.view
    if snapshot.state == "card_detail":
        return render_detail(snapshot)
    if isinstance(view, CardForm):
        return render_form(view)
    if isinstance(view, ConfirmDelete):
        return render_confirm(view, snapshot)
    if isinstance(view, MoveCard):
        return render_move(view, snapshot)
    return ""


class BoardApp(App):
    """Paints a Session; every key goes to Session.handle_key."""

    ENABLE_COMMAND_PALETTE = False

    CSS = """
    #board {
        height: 1fr;
        padding: 0 1;
    }

    #panel {
        height: auto;
        min-height: 3;
        border: solid $primary;
        padding: 0 1;
    }

    #hint-bar {
        dock: bottom;
        height: 1;
        background: $surface;
        padding: 0 1;
    }

    #help {
        display: none;
        layer: overlay;
        width: 64;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
        offset: 4 2;
    }
    """

    def __init__(self, session: Session) -> None:
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            Static(id="board"),
            Static(id="panel"),
            id="main-container",
        )
        yield Static(HELP_TEXT, id="help")
        yield Static(id="hint-bar")

    def on_mount(self) -> None:
        self.title = f"cardboard: {self.session.cards.board.name}"
        self.refresh_view()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.session.handle_key(event.key, event.character)
        if self.session.should_quit:
            self.exit()
            return
        self.refresh_view()

    def refresh_view(self) -> None:
        snapshot = self.session.snapshot()
        self.sub_title = snapshot.state.replace("_", " ")

        self.query_one("#board", Static).update(render_board(snapshot))
        panel = self.query_one("#panel", Static)
        content = render_panel(snapshot)
        panel.update(content)
        panel.display = bool(content)

        self.query_one("#help", Static).display = snapshot.help_visible
        self.query_one("#hint-bar", Static).update(escape(HINTS[snapshot.state]))

        if snapshot.notice:
            self.notify(snapshot.notice.message, severity=snapshot.notice.severity)


def cmd_tui(args, settings: Settings) -> int:
    """Run the interactive board. Load failures are raised before the screen opens."""
    cards = BoardService(settings.base_path).open_card_service()
    session = Session(cards)
    logger.info(f"[SESSION] Started on board '{cards.board.id}'")
    BoardApp(session).run()
    return 0
