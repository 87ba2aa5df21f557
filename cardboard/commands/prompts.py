"""
Line-based prompts for the --interactive command wizards.

Plain input() calls, so the wizards work over any terminal and can be driven
by piping answers on stdin. End of input takes the default answer.
"""

from cardboard.domain.errors import ValidationError
from cardboard.domain.models import Card


def prompt(message: str, default: str = "") -> str:
    """Prompt user for input with optional default."""
    display = f"{message} [{default}]: " if default else f"{message}: "
    try:
        value = input(display).strip()
    except EOFError:
        return default
    return value if value else default


def prompt_required(message: str, field: str) -> str:
    """Prompt until a non-blank answer is given.

    Raises:
        ValidationError: input ended before an answer was given
    """
    while True:
        try:
            value = input(f"{message}: ").strip()
        except EOFError:
            raise ValidationError(f"{field.capitalize()} is required", field=field) from None
        if value:
            return value
        print(f"{field.capitalize()} is required")


def prompt_choice(message: str, choices: list[tuple[str, str]], default: int = 1) -> str:
    """Prompt user to select from numbered choices.

    Args:
        message: Prompt message
        choices: List of (value, description) tuples
        default: 1-indexed default choice

    Returns:
        Selected value
    """
    print(f"\n{message}")
    for i, (_, desc) in enumerate(choices, 1):
        marker = "*" if i == default else " "
        print(f"  {marker}{i}. {desc}")

    while True:
        try:
            selection = input(f"Select [1-{len(choices)}, default={default}]: ").strip()
        except EOFError:
            return choices[default - 1][0]
        if not selection:
            return choices[default - 1][0]
        if selection.isdigit() and 1 <= int(selection) <= len(choices):
            return choices[int(selection) - 1][0]
        print(f"Please enter a number between 1 and {len(choices)}")


def prompt_bool(message: str, default: bool = False) -> bool:
    """Prompt user for yes/no answer."""
    default_str = "Y/n" if default else "y/N"
    try:
        value = input(f"{message} [{default_str}]: ").strip().lower()
    except EOFError:
        return default
    if not value:
        return default
    return value in ("y", "yes")


def prompt_card(message: str, cards: tuple[Card, ...]) -> str:
    """Pick one card by number; returns its ID."""
    return prompt_choice(message, [(c.id, f"{c.id}: {c.title}") for c in cards])
