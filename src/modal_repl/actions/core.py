"""Mode switching, submission, and session actions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modal_repl.modes.base_mode import EditorContext, Mode, Nop, Quit, SwitchMode

if TYPE_CHECKING:
    from modal_repl.keymaps import ResolutionMatch

SCROLL_STEP = 5


def enter_insert_mode(context: EditorContext, match: ResolutionMatch) -> SwitchMode:
    del context, match
    return SwitchMode(Mode.INSERT)


def append_after_cursor(context: EditorContext, match: ResolutionMatch) -> SwitchMode:
    del match
    context.buffer.move_right()
    return SwitchMode(Mode.INSERT)


def append_line_end(context: EditorContext, match: ResolutionMatch) -> SwitchMode:
    del match
    context.buffer.move_line_end()
    return SwitchMode(Mode.INSERT)


def insert_line_start(context: EditorContext, match: ResolutionMatch) -> SwitchMode:
    del match
    context.buffer.move_line_start()
    return SwitchMode(Mode.INSERT)


def open_line_below(context: EditorContext, match: ResolutionMatch) -> SwitchMode:
    del match
    context.buffer.open_line_below()
    return SwitchMode(Mode.INSERT)


def exit_to_normal_mode(context: EditorContext, match: ResolutionMatch) -> SwitchMode:
    del context, match
    return SwitchMode(Mode.NORMAL)


async def submit_buffer(context: EditorContext, match: ResolutionMatch) -> Nop:
    """Send the joined buffer lines out and clear the buffer once answered."""

    del match
    lines = context.buffer.lines
    await context.app.submit_message(lines, context.dispatcher)
    context.buffer.clear()
    return Nop()


def quit_session(context: EditorContext, match: ResolutionMatch) -> Quit:
    del context, match
    return Quit()


def scroll_output_down(context: EditorContext, match: ResolutionMatch) -> None:
    del match
    context.app.scroll_output(SCROLL_STEP)


def scroll_output_up(context: EditorContext, match: ResolutionMatch) -> None:
    del match
    context.app.scroll_output(-SCROLL_STEP)


__all__ = [
    "enter_insert_mode",
    "append_after_cursor",
    "append_line_end",
    "insert_line_start",
    "open_line_below",
    "exit_to_normal_mode",
    "submit_buffer",
    "quit_session",
    "scroll_output_down",
    "scroll_output_up",
]
