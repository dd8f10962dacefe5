"""Immutable line storage for the input buffer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple


@dataclass(frozen=True, slots=True)
class BufferDocument:
    """Lines of the buffer plus an edit counter.

    There is always at least one (possibly empty) line. Edits produce a new
    document through :meth:`replace`, whose ``version`` is one higher.
    """

    lines: Tuple[str, ...] = ("",)
    version: int = 0

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "BufferDocument":
        return cls(tuple(lines) or ("",))

    def snapshot(self) -> Tuple[str, ...]:
        return self.lines

    def replace(self, lines: Iterable[str]) -> "BufferDocument":
        return BufferDocument(tuple(lines) or ("",), self.version + 1)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def get_line(self, row: int) -> str:
        return self.lines[row]
