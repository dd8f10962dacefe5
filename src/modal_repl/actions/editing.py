"""Buffer edits and cursor motions bound in both modes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from modal_repl.buffer import TextBuffer
from modal_repl.modes.base_mode import EditorContext

if TYPE_CHECKING:
    from modal_repl.keymaps import ResolutionMatch

EditAction = Callable[[EditorContext, "ResolutionMatch"], None]


def _on_buffer(operation: Callable[[TextBuffer], object], name: str) -> EditAction:
    def action(context: EditorContext, match: ResolutionMatch) -> None:
        del match
        operation(context.buffer)

    action.__name__ = name
    action.__qualname__ = name
    return action


move_left = _on_buffer(TextBuffer.move_left, "move_left")
move_right = _on_buffer(TextBuffer.move_right, "move_right")
move_up = _on_buffer(TextBuffer.move_up, "move_up")
move_down = _on_buffer(TextBuffer.move_down, "move_down")
move_word_forward = _on_buffer(TextBuffer.move_word_forward, "move_word_forward")
move_word_back = _on_buffer(TextBuffer.move_word_back, "move_word_back")
move_line_start = _on_buffer(TextBuffer.move_line_start, "move_line_start")
move_line_end = _on_buffer(TextBuffer.move_line_end, "move_line_end")
move_top = _on_buffer(TextBuffer.move_top, "move_top")
move_bottom = _on_buffer(TextBuffer.move_bottom, "move_bottom")

backspace = _on_buffer(TextBuffer.backspace, "backspace")
delete_char = _on_buffer(TextBuffer.delete_char, "delete_char")
delete_word_before = _on_buffer(TextBuffer.delete_word_before, "delete_word_before")
delete_word_forward = _on_buffer(TextBuffer.delete_word_forward, "delete_word_forward")
delete_to_line_start = _on_buffer(
    TextBuffer.delete_to_line_start, "delete_to_line_start"
)
clear_line = _on_buffer(TextBuffer.clear_line, "clear_line")
undo = _on_buffer(TextBuffer.undo, "undo")
redo = _on_buffer(TextBuffer.redo, "redo")
