"""
cardboard init / info - board lifecycle commands.
"""

from cardboard.domain import engine
from cardboard.domain.errors import AlreadyInitialized, BoardNotFound
from cardboard.lib.config import Settings
from cardboard.lib.storage import find_board_path
from cardboard.service import BoardService
from cardboard.commands.prompts import prompt, prompt_bool, prompt_choice

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

PRESET_LABELS = {
    "default": "Default (To Do, In Progress, Done)",
    "simple": "Simple (To Do, Done)",
    "development": "Development (Backlog, In Progress, Review, Done)",
}


def _interactive_init(service: BoardService, args) -> tuple[str, str]:
    """Ask for the board name and column preset."""
    if service.exists():
        raise AlreadyInitialized(service.store.path)
    print("Initialize a new board\n")
    name = prompt("Board name", default=args.name or service.default_name())
    preset = args.columns
    if prompt_bool("Customize the columns?"):
        preset = prompt_choice(
            "Column preset:",
            list(PRESET_LABELS.items()),
            default=list(PRESET_LABELS).index(preset) + 1,
        )
    return name, preset


def cmd_init(args, settings: Settings) -> int:
    """Create a board in the target directory."""
    service = BoardService(settings.base_path)
    name, preset = args.name, args.columns
    if args.interactive:
        name, preset = _interactive_init(service, args)
    board = service.initialize(name=name, prefix=args.prefix, columns=engine.COLUMN_PRESETS[preset])

    print(f"Initialized board '{board.name}' in {settings.base_path}")
    print(f"  Card ID prefix: {board.card_id_prefix}")
    print(f"  Columns: {', '.join(c.name for c in board.sorted_columns())}")
    return 0


def cmd_info(args, settings: Settings) -> int:
    """Show board metadata and per-column card counts."""
    service = BoardService(settings.base_path)
    if not service.exists():
        found = find_board_path(settings.base_path)
        if found is None:
            raise BoardNotFound(service.store.path)
        found_base = found.parent.parent
        print(f"Board found in parent directory: {found_base}")
        print(f"Run 'cardboard --path {found_base} info' to view it.")
        return 0

    board = service.load()
    print(f"Board: {board.name}")
    print(f"ID: {board.id}")
    print(f"Card ID prefix: {board.card_id_prefix}")
    print(f"Next card: {board.card_id_prefix}-{board.next_card_number:03d}")
    print(f"Created: {board.created_at.strftime(TIMESTAMP_FORMAT)}")
    print()
    print("Columns:")
    for column in board.sorted_columns():
        count = len(engine.cards_in_column(board, column.id))
        print(f"  {column.name} ({column.id}): {count} cards")
    print()
    print(f"Total cards: {len(board.cards)}")
    return 0
