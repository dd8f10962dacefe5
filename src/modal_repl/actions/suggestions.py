"""Suggestion cycling and acceptance."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modal_repl.modes.base_mode import EditorContext

if TYPE_CHECKING:
    from modal_repl.keymaps import ResolutionMatch


def next_suggestion(context: EditorContext, match: ResolutionMatch) -> None:
    del match
    # cycling an empty list has no defined result
    if context.app.suggestions:
        context.app.iterate_suggestion()


def accept_suggestion(context: EditorContext, match: ResolutionMatch) -> None:
    del match
    context.app.choose_suggestion(context.buffer)
