"""
cardboard create / move / show / list / update / delete - card commands.

Each command opens the board once, performs a single CardService call (which
writes through to disk) and prints the outcome. Failures propagate as
CardboardError for the CLI to report.

With --interactive the missing arguments are asked for on the terminal
instead (card pickers, column pickers, optional fields).
"""

from cardboard.domain.errors import ValidationError
from cardboard.domain.models import Card
from cardboard.lib.config import Settings
from cardboard.service import BoardService, CardService
from cardboard.commands.prompts import (
    prompt,
    prompt_bool,
    prompt_card,
    prompt_choice,
    prompt_required,
)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


def _open(settings: Settings) -> CardService:
    return BoardService(settings.base_path).open_card_service()


def _column_choices(cards: CardService, exclude: str | None = None) -> list[tuple[str, str]]:
    return [(c.id, f"{c.name} ({c.id})") for c in cards.columns() if c.id != exclude]


def _pick_card(cards: CardService, action: str) -> str | None:
    """Card picker for the interactive wizards; None when the board is empty."""
    listed = cards.list_cards()
    if not listed:
        print("No cards found on this board.")
        return None
    return prompt_card(f"Select card to {action}:", listed)


def format_card_line(card: Card) -> str:
    assignee = f" [@{card.assignee}]" if card.assignee else ""
    return f"  {card.id}: {card.title}{assignee}"


def cmd_create(args, settings: Settings) -> int:
    cards = _open(settings)
    title, description, column = args.title, args.description, args.column
    assignee = args.assignee if args.assignee is not None else settings.default_assignee

    if args.interactive:
        print("Create a new card\n")
        title = prompt_required("Card title", "title")
        description = prompt("Description (optional)", default=description or "")
        assignee = prompt("Assignee (optional)", default=assignee or "")
        choices = _column_choices(cards)
        default = [cid for cid, _ in choices].index(column) + 1 if column in dict(choices) else 1
        column = prompt_choice("Column:", choices, default=default)

    card = cards.create_card(title, description=description, assignee=assignee, column_id=column)
    print(f"Created card {card.id}")
    print(f"  Title: {card.title}")
    print(f"  Column: {cards.get_column(card.column_id).name}")
    return 0


def cmd_move(args, settings: Settings) -> int:
    cards = _open(settings)
    card_id, column_id = args.card_id, args.column

    if args.interactive:
        print("Move a card\n")
        card_id = _pick_card(cards, "move")
        if card_id is None:
            return 0
        current = cards.find_card(card_id)
        print(f"  Currently in: {cards.get_column(current.column_id).name}")
        choices = _column_choices(cards, exclude=current.column_id)
        if not choices:
            print("No other columns to move to.")
            return 0
        column_id = prompt_choice("Move to column:", choices)

    before = cards.find_card(card_id).column_id
    card = cards.move_card(card_id, column_id)
    column = cards.get_column(card.column_id)
    if before == card.column_id:
        print(f"{card.id} is already in {column.name}")
    else:
        print(f"Moved {card.id} to {column.name}")
    print(f"  Title: {card.title}")
    return 0


def cmd_show(args, settings: Settings) -> int:
    cards = _open(settings)
    card_id = args.card_id
    if args.interactive:
        card_id = _pick_card(cards, "view")
        if card_id is None:
            return 0

    card = cards.find_card(card_id)
    column = cards.get_column(card.column_id)

    print(f"Card: {card.id}")
    print(f"  Title:       {card.title}")
    if card.description:
        print(f"  Description: {card.description}")
    print(f"  Column:      {column.name} ({column.id})")
    if card.assignee:
        print(f"  Assignee:    {card.assignee}")
    print(f"  Created:     {card.created_at.strftime(TIMESTAMP_FORMAT)}")
    print(f"  Updated:     {card.updated_at.strftime(TIMESTAMP_FORMAT)}")
    return 0


def _interactive_filters(cards: CardService) -> tuple[str | None, str | None]:
    if not prompt_bool("Apply filters?"):
        return None, None
    column = None
    if prompt_bool("Filter by column?"):
        column = prompt_choice("Column:", _column_choices(cards))
    assignee = None
    if prompt_bool("Filter by assignee?"):
        assignees = sorted({c.assignee for c in cards.board.cards.values() if c.assignee})
        if assignees:
            assignee = prompt_choice("Assignee:", [(a, a) for a in assignees])
        else:
            print("No assignees found on any cards.")
    return column, assignee


def cmd_list(args, settings: Settings) -> int:
    cards = _open(settings)
    column_filter, assignee_filter = args.column, args.assignee
    if args.interactive:
        column_filter, assignee_filter = _interactive_filters(cards)

    listed = cards.list_cards(column=column_filter, assignee=assignee_filter)
    board = cards.board

    print(f"Board: {board.name} ({board.id})")
    print(f"Total cards: {len(board.cards)}")
    for column in cards.columns():
        if column_filter and column.id != column_filter:
            continue
        in_column = [c for c in listed if c.column_id == column.id]
        header = f"{column.name} ({column.id})"
        print()
        print(header)
        print("-" * len(header))
        if not in_column:
            print("  (no cards)")
        for card in in_column:
            print(format_card_line(card))
    return 0


def _interactive_optional(label: str, current: str | None) -> dict:
    """Ask whether to change an optional field; returns {} when left alone."""
    field = label.lower()
    if not prompt_bool(f"Update {field}?"):
        return {}
    if current:
        if prompt_bool(f"Clear {field}?"):
            return {field: None}
        return {field: prompt(f"New {field}", default=current)}
    value = prompt(f"Add {field}")
    return {field: value} if value else {}


def _interactive_update(cards: CardService, card_id: str) -> dict:
    card = cards.find_card(card_id)
    print(f"\nSelected: {card.title}\n")
    fields = {}
    if prompt_bool("Update title?"):
        fields["title"] = prompt("New title", default=card.title)
    fields.update(_interactive_optional("Description", card.description))
    fields.update(_interactive_optional("Assignee", card.assignee))
    return fields


def cmd_update(args, settings: Settings) -> int:
    if args.interactive:
        cards = _open(settings)
        print("Update a card\n")
        card_id = _pick_card(cards, "update")
        if card_id is None:
            return 0
        fields = _interactive_update(cards, card_id)
        if not fields:
            print("No changes made.")
            return 0
    else:
        card_id = args.card_id
        fields = {}
        if args.title is not None:
            fields["title"] = args.title
        if args.clear_description:
            fields["description"] = None
        elif args.description is not None:
            fields["description"] = args.description
        if args.clear_assignee:
            fields["assignee"] = None
        elif args.assignee is not None:
            fields["assignee"] = args.assignee
        if not fields:
            raise ValidationError("Nothing to update: pass --title, --description, --assignee or a --clear flag")
        cards = _open(settings)

    card = cards.update_card(card_id, **fields)
    print(f"Updated {card.id}")
    print(f"  Title: {card.title}")
    return 0


def cmd_delete(args, settings: Settings) -> int:
    cards = _open(settings)
    card_id = args.card_id
    if args.interactive:
        print("Delete a card\n")
        card_id = _pick_card(cards, "delete")
        if card_id is None:
            return 0

    card = cards.find_card(card_id)
    if args.interactive:
        print("\nCard to delete:")
        print(f"  ID: {card.id}")
        print(f"  Title: {card.title}")
        if card.description:
            print(f"  Description: {card.description}")
        if card.assignee:
            print(f"  Assignee: {card.assignee}")
    if not args.force and not prompt_bool(f"Are you sure you want to delete {card.id}?"):
        print("Cancelled.")
        return 0
    cards.delete_card(card.id)
    print(f"Deleted {card.id}")
    return 0
