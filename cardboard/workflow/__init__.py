"""Interactive session workflow (keyed-input state machine)."""

from cardboard.workflow.session import (
    Session,
    Snapshot,
    ColumnSnapshot,
    Notice,
    BoardView,
    CardDetail,
    CardForm,
    ConfirmDelete,
    MoveCard,
    Draft,
    FormField,
    FormMode,
    STATES,
    TRANSITIONS,
)

__all__ = [
    "Session",
    "Snapshot",
    "ColumnSnapshot",
    "Notice",
    "BoardView",
    "CardDetail",
    "CardForm",
    "ConfirmDelete",
    "MoveCard",
    "Draft",
    "FormField",
    "FormMode",
    "STATES",
    "TRANSITIONS",
]
