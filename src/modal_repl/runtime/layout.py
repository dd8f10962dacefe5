"""Three-pane frame description handed to terminal surfaces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from modal_repl.buffer import Cursor
from modal_repl.modes import Mode, ModeStyle, style_for
from modal_repl.state import DisplayColor

if TYPE_CHECKING:
    from modal_repl.modes.editor import ModalEditor


@dataclass(frozen=True, slots=True)
class PaneLayout:
    """Fixed editor and suggestion heights; output takes what is left."""

    editor_height: int = 10
    suggestion_height: int = 2

    def split(self, total_height: int) -> Tuple[int, int, int]:
        output = max(1, total_height - self.editor_height - self.suggestion_height)
        return (self.editor_height, self.suggestion_height, output)


@dataclass(frozen=True, slots=True)
class Frame:
    lines: Tuple[str, ...]
    cursor: Cursor
    mode: Mode
    style: ModeStyle
    pending: Tuple[str, ...]
    suggestions: Tuple[str, ...]
    messages: Tuple[str, ...]
    color: DisplayColor
    scroll_position: int
    content_length: int
    layout: PaneLayout

    @property
    def suggestion_text(self) -> str:
        return " ".join(self.suggestions)

    @property
    def output_text(self) -> str:
        return "\n".join(self.messages)


def compose_frame(editor: ModalEditor, layout: PaneLayout) -> Frame:
    app = editor.context.app
    return Frame(
        lines=tuple(editor.buffer.lines),
        cursor=editor.buffer.cursor,
        mode=editor.mode,
        style=style_for(editor.mode),
        pending=editor.pending,
        suggestions=tuple(app.suggestions),
        messages=tuple(app.messages),
        color=app.color,
        scroll_position=app.scroll.position,
        content_length=app.scroll.content_length,
        layout=layout,
    )
