"""Editor buffer façade combining document, cursor state, and undo."""

from __future__ import annotations

import re
from contextlib import AbstractContextManager
from typing import ContextManager, Iterable, Optional, Sequence

from modal_repl.runtime import telemetry

from .document import BufferDocument
from .state import BufferState, Cursor
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_cursor

TRAILING_TOKEN_RE = re.compile(r"[A-Za-z0-9_]+$")


def _char_class(char: str) -> int:
    if char.isspace():
        return 0
    if char.isalnum() or char == "_":
        return 1
    return 2


class TextBuffer:
    """Multi-line input buffer with a single cursor.

    Edits are applied through :class:`Transaction` so each one lands in the
    undo timeline and bumps the document version. Cursor motions never touch
    the version.
    """

    def __init__(
        self,
        *,
        name: str = "input",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        undo: Optional[UndoTimeline] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.undo_timeline = undo or UndoTimeline()

    @classmethod
    def from_text(cls, text: str, *, name: str = "input") -> "TextBuffer":
        buffer = cls(name=name, document=BufferDocument.from_lines(text.split("\n")))
        last = buffer.document.line_count - 1
        buffer.state.set_cursor(last, len(buffer.document.get_line(last)))
        return buffer

    @property
    def lines(self) -> Sequence[str]:
        return self.document.snapshot()

    @property
    def text(self) -> str:
        return "\n".join(self.document.snapshot())

    @property
    def version(self) -> int:
        return self.document.version

    @property
    def cursor(self) -> Cursor:
        return self.state.cursor

    def line_before_cursor(self) -> str:
        row, col = self.state.cursor
        return self.document.get_line(row)[:col]

    def is_empty(self) -> bool:
        return self.document.snapshot() == ("",)

    # -- edits -----------------------------------------------------------

    def insert_text(self, text: str) -> None:
        if not text:
            return
        row, col = self.state.cursor
        lines = list(self.document.snapshot())
        line = lines[row]
        pieces = (line[:col] + text + line[col:]).split("\n")
        lines[row : row + 1] = pieces
        tail = text.split("\n")[-1]
        if len(pieces) == 1:
            cursor = (row, col + len(text))
        else:
            cursor = (row + len(pieces) - 1, len(tail))
        self._apply("insert_text", lines, cursor)

    def open_line_below(self) -> None:
        row, _ = self.state.cursor
        lines = list(self.document.snapshot())
        lines.insert(row + 1, "")
        self._apply("open_line", lines, (row + 1, 0))

    def backspace(self) -> None:
        row, col = self.state.cursor
        lines = list(self.document.snapshot())
        if col > 0:
            line = lines[row]
            lines[row] = line[: col - 1] + line[col:]
            self._apply("backspace", lines, (row, col - 1))
        elif row > 0:
            previous = lines[row - 1]
            lines[row - 1 : row + 1] = [previous + lines[row]]
            self._apply("backspace", lines, (row - 1, len(previous)))

    def delete_char(self) -> None:
        row, col = self.state.cursor
        lines = list(self.document.snapshot())
        line = lines[row]
        if col < len(line):
            lines[row] = line[:col] + line[col + 1 :]
        elif row + 1 < len(lines):
            lines[row : row + 2] = [line + lines[row + 1]]
        else:
            return
        self._apply("delete_char", lines, (row, col))

    def delete_word_before(self) -> None:
        row, col = self.state.cursor
        if col == 0:
            self.backspace()
            return
        line = self.document.get_line(row)
        start = col
        while start > 0 and _char_class(line[start - 1]) == 0:
            start -= 1
        if start > 0:
            kind = _char_class(line[start - 1])
            while start > 0 and _char_class(line[start - 1]) == kind:
                start -= 1
        self._replace_in_line(row, start, col, "", label="delete_word")

    def delete_word_forward(self) -> None:
        row, col = self.state.cursor
        line = self.document.get_line(row)
        if col >= len(line):
            return
        end = col
        kind = _char_class(line[end])
        while end < len(line) and _char_class(line[end]) == kind:
            end += 1
        while end < len(line) and _char_class(line[end]) == 0:
            end += 1
        self._replace_in_line(row, col, end, "", label="delete_word_forward")

    def delete_trailing_token(self) -> str:
        """Remove the identifier run right before the cursor and return it."""

        row, col = self.state.cursor
        match = TRAILING_TOKEN_RE.search(self.document.get_line(row)[:col])
        if match is None:
            return ""
        self._replace_in_line(row, match.start(), col, "", label="delete_token")
        return match.group(0)

    def delete_to_line_start(self) -> None:
        row, col = self.state.cursor
        if col:
            self._replace_in_line(row, 0, col, "", label="delete_to_start")

    def clear_line(self) -> None:
        row, _ = self.state.cursor
        lines = list(self.document.snapshot())
        del lines[row]
        if not lines:
            lines = [""]
        self._apply("clear_line", lines, (min(row, len(lines) - 1), 0))

    def clear(self) -> None:
        if self.is_empty():
            return
        self._apply("clear", [""], (0, 0))

    def undo(self) -> bool:
        entry = self.undo_timeline.undo()
        if entry is None:
            return False
        self.document = self.document.replace(entry.before_lines)
        self.state.set_cursor(*entry.cursor_before)
        return True

    def redo(self) -> bool:
        entry = self.undo_timeline.redo()
        if entry is None:
            return False
        self.document = self.document.replace(entry.after_lines)
        self.state.set_cursor(*entry.cursor_after)
        return True

    # -- motions ---------------------------------------------------------

    def move_left(self) -> None:
        row, col = self.state.cursor
        if col > 0:
            self.state.set_cursor(row, col - 1)

    def move_right(self) -> None:
        row, col = self.state.cursor
        if col < len(self.document.get_line(row)):
            self.state.set_cursor(row, col + 1)

    def move_up(self) -> None:
        self._move_vertical(-1)

    def move_down(self) -> None:
        self._move_vertical(1)

    def move_line_start(self) -> None:
        self.state.set_cursor(self.state.cursor[0], 0)

    def move_line_end(self) -> None:
        row = self.state.cursor[0]
        self.state.set_cursor(row, len(self.document.get_line(row)))

    def move_top(self) -> None:
        self.state.set_cursor(0, 0)

    def move_bottom(self) -> None:
        last = self.document.line_count - 1
        self.state.set_cursor(last, 0)

    def move_word_forward(self) -> None:
        row, col = self.state.cursor
        line = self.document.get_line(row)
        if col >= len(line):
            if row + 1 < self.document.line_count:
                self.state.set_cursor(row + 1, 0)
            return
        kind = _char_class(line[col])
        while col < len(line) and _char_class(line[col]) == kind:
            col += 1
        while col < len(line) and _char_class(line[col]) == 0:
            col += 1
        self.state.set_cursor(row, col)

    def move_word_back(self) -> None:
        row, col = self.state.cursor
        if col == 0:
            if row > 0:
                self.state.set_cursor(row - 1, len(self.document.get_line(row - 1)))
            return
        line = self.document.get_line(row)
        while col > 0 and _char_class(line[col - 1]) == 0:
            col -= 1
        if col > 0:
            kind = _char_class(line[col - 1])
            while col > 0 and _char_class(line[col - 1]) == kind:
                col -= 1
        self.state.set_cursor(row, col)

    # -- internals -------------------------------------------------------

    def _move_vertical(self, delta: int) -> None:
        row, _ = self.state.cursor
        target = row + delta
        if target < 0 or target >= self.document.line_count:
            return
        col = min(self.state.preferred_col, len(self.document.get_line(target)))
        self.state.set_cursor(target, col, keep_preferred=True)

    def _replace_in_line(
        self, row: int, start: int, end: int, text: str, *, label: str
    ) -> None:
        lines = list(self.document.snapshot())
        line = lines[row]
        lines[row] = line[:start] + text + line[end:]
        self._apply(label, lines, (row, start + len(text)))

    def _apply(self, label: str, lines: Iterable[str], cursor: Cursor) -> None:
        with Transaction(self, label) as tx:
            before = self.document.snapshot()
            after = tuple(lines)
            if after == before:
                return
            cursor_before = self.state.cursor
            self.document = self.document.replace(after)
            self.state.set_cursor(*ensure_cursor(self.document, cursor))
            tx.commit(before, after, cursor_before, self.state.cursor)


class Transaction(AbstractContextManager["Transaction"]):
    """Wraps a single buffer edit in a telemetry span and records undo."""

    def __init__(self, buffer: TextBuffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(
        self,
        before_lines: tuple[str, ...],
        after_lines: tuple[str, ...],
        cursor_before: Cursor,
        cursor_after: Cursor,
    ) -> None:
        self.buffer.undo_timeline.push(
            UndoEntry(
                label=self.label,
                before_lines=before_lines,
                after_lines=after_lines,
                cursor_before=cursor_before,
                cursor_after=cursor_after,
            )
        )

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
