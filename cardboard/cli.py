#!/usr/bin/env python3
"""cardboard CLI entrypoint."""

import sys
import argparse

from cardboard.domain.engine import COLUMN_PRESETS
from cardboard.domain.errors import CardboardError, EXIT_BOARD, EXIT_GENERAL
from cardboard.lib.config import load_settings, resolve_base_path
from cardboard.lib.logs import setup_logging
from cardboard.commands import board as cmd_board_module
from cardboard.commands import cards as cmd_cards_module
from cardboard.commands import tui as cmd_tui_module


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='cardboard', description='File-backed kanban board')
    parser.add_argument('--path', '-p', help='Directory holding the board (default: $CARDBOARD_PATH or cwd)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # cardboard init
    p_init = subparsers.add_parser('init', help='Create a board in the target directory')
    p_init.add_argument('--name', '-n', help='Board name (default: directory name)')
    p_init.add_argument('--prefix', help='Card ID prefix (default: from the board name)')
    p_init.add_argument('--columns', choices=sorted(COLUMN_PRESETS), default='default', help='Column preset')
    p_init.add_argument('--interactive', '-i', action='store_true', help='Prompt for name and columns')
    p_init.set_defaults(func=cmd_board_module.cmd_init)

    # cardboard create
    p_create = subparsers.add_parser('create', help='Create a card')
    p_create.add_argument('title', nargs='?', help='Card title (prompted with -i)')
    p_create.add_argument('--description', '-d', help='Card description')
    p_create.add_argument('--assignee', '-a', help='Assignee (default: CARDBOARD_DEFAULT_ASSIGNEE)')
    p_create.add_argument('--column', '-c', help='Column ID (default: first column)')
    p_create.add_argument('--interactive', '-i', action='store_true', help='Prompt for the card fields')
    p_create.set_defaults(func=cmd_cards_module.cmd_create, needs=('title',))

    # cardboard move
    p_move = subparsers.add_parser('move', help='Move a card to another column')
    p_move.add_argument('card_id', nargs='?', help='Card ID (e.g., PRJ-001)')
    p_move.add_argument('column', nargs='?', help='Target column ID')
    p_move.add_argument('--interactive', '-i', action='store_true', help='Pick the card and column')
    p_move.set_defaults(func=cmd_cards_module.cmd_move, needs=('card_id', 'column'))

    # cardboard show
    p_show = subparsers.add_parser('show', help='Show card details')
    p_show.add_argument('card_id', nargs='?', help='Card ID')
    p_show.add_argument('--interactive', '-i', action='store_true', help='Pick the card')
    p_show.set_defaults(func=cmd_cards_module.cmd_show, needs=('card_id',))

    # cardboard list
    p_list = subparsers.add_parser('list', help='List cards grouped by column')
    p_list.add_argument('--column', '-c', help='Only this column')
    p_list.add_argument('--assignee', '-a', help='Only cards with this assignee')
    p_list.add_argument('--interactive', '-i', action='store_true', help='Prompt for filters')
    p_list.set_defaults(func=cmd_cards_module.cmd_list)

    # cardboard update
    p_update = subparsers.add_parser('update', help='Update card fields')
    p_update.add_argument('card_id', nargs='?', help='Card ID')
    p_update.add_argument('--title', '-t', help='New title')
    desc = p_update.add_mutually_exclusive_group()
    desc.add_argument('--description', '-d', help='New description')
    desc.add_argument('--clear-description', action='store_true', help='Remove the description')
    assignee = p_update.add_mutually_exclusive_group()
    assignee.add_argument('--assignee', '-a', help='New assignee')
    assignee.add_argument('--clear-assignee', action='store_true', help='Remove the assignee')
    p_update.add_argument('--interactive', '-i', action='store_true', help='Pick the card and the fields to change')
    p_update.set_defaults(func=cmd_cards_module.cmd_update, needs=('card_id',))

    # cardboard delete
    p_delete = subparsers.add_parser('delete', help='Delete a card')
    p_delete.add_argument('card_id', nargs='?', help='Card ID')
    p_delete.add_argument('--force', '-f', action='store_true', help='Skip confirmation')
    p_delete.add_argument('--interactive', '-i', action='store_true', help='Pick the card')
    p_delete.set_defaults(func=cmd_cards_module.cmd_delete, needs=('card_id',))

    # cardboard info
    p_info = subparsers.add_parser('info', help='Show board metadata and card counts')
    p_info.set_defaults(func=cmd_board_module.cmd_info)

    # cardboard tui
    p_tui = subparsers.add_parser('tui', help='Open the interactive board')
    p_tui.set_defaults(func=cmd_tui_module.cmd_tui)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    missing = [name for name in getattr(args, 'needs', ()) if getattr(args, name) is None]
    if missing and not getattr(args, 'interactive', False):
        parser.error(f"{args.command}: the following arguments are required: {', '.join(missing)} (or use --interactive)")

    base_path = resolve_base_path(args.path)
    try:
        settings = load_settings(base_path)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_BOARD

    level = 'DEBUG' if args.verbose else settings.log_level
    # The TUI owns the terminal; it only logs to the configured file
    try:
        setup_logging(level, log_file=settings.log_file, to_stderr=args.command != 'tui')
    except OSError as e:
        print(f"ERROR: Cannot open log file {settings.log_file}: {e}", file=sys.stderr)
        return EXIT_GENERAL

    try:
        return args.func(args, settings)
    except CardboardError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return e.exit_code


if __name__ == '__main__':
    sys.exit(main())
