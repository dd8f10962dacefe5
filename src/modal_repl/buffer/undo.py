"""Linear undo history for buffer edits."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Tuple

from .state import Cursor


@dataclass(frozen=True, slots=True)
class UndoEntry:
    """Lines and cursor on both sides of one edit."""

    label: str
    before_lines: Tuple[str, ...]
    after_lines: Tuple[str, ...]
    cursor_before: Cursor
    cursor_after: Cursor


class UndoTimeline:
    """Two-stack history; recording a new edit drops the redo stack."""

    def __init__(self, *, limit: int = 500) -> None:
        self._done: Deque[UndoEntry] = deque(maxlen=limit)
        self._undone: List[UndoEntry] = []

    def push(self, entry: UndoEntry) -> None:
        self._done.append(entry)
        self._undone.clear()

    def undo(self) -> Optional[UndoEntry]:
        if not self._done:
            return None
        entry = self._done.pop()
        self._undone.append(entry)
        return entry

    def redo(self) -> Optional[UndoEntry]:
        if not self._undone:
            return None
        entry = self._undone.pop()
        self._done.append(entry)
        return entry

    def can_undo(self) -> bool:
        return bool(self._done)

    def can_redo(self) -> bool:
        return bool(self._undone)

    def __len__(self) -> int:
        return len(self._done) + len(self._undone)
