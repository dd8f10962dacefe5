"""Cursor state tied to a BufferDocument version."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Cursor = Tuple[int, int]  # (row, column)


@dataclass(slots=True)
class BufferState:
    cursor: Cursor = (0, 0)
    # column the cursor tries to return to on vertical moves
    preferred_col: int = 0

    def set_cursor(self, row: int, col: int, *, keep_preferred: bool = False) -> None:
        self.cursor = (row, col)
        if not keep_preferred:
            self.preferred_col = col
