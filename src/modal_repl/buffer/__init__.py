"""Input buffer, cursor state, and undo history."""

from .buffer import TRAILING_TOKEN_RE, TextBuffer, Transaction
from .document import BufferDocument
from .state import BufferState, Cursor
from .undo import UndoEntry, UndoTimeline
from .validation import BufferValidationError, ensure_cursor

__all__ = [
    "TRAILING_TOKEN_RE",
    "TextBuffer",
    "Transaction",
    "BufferDocument",
    "BufferState",
    "Cursor",
    "UndoEntry",
    "UndoTimeline",
    "BufferValidationError",
    "ensure_cursor",
]
