"""Built-in actions and the explicit binding table of every mode."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from modal_repl.actions import core as core_actions
from modal_repl.actions import editing as edit_actions
from modal_repl.actions import suggestions as suggestion_actions
from modal_repl.modes.base_mode import Mode

from .models import ActionRef, Binding, KeySequence
from .registry import KeymapRegistry

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef("core.enter_insert", core_actions.enter_insert_mode, "Enter insert mode"),
    ActionRef("core.append", core_actions.append_after_cursor, "Append after cursor"),
    ActionRef("core.append_eol", core_actions.append_line_end, "Append at line end"),
    ActionRef("core.insert_bol", core_actions.insert_line_start, "Insert at line start"),
    ActionRef("core.open_below", core_actions.open_line_below, "Open line below"),
    ActionRef("core.exit_to_normal", core_actions.exit_to_normal_mode, "Normal mode"),
    ActionRef("core.submit", core_actions.submit_buffer, "Submit the input"),
    ActionRef("core.quit", core_actions.quit_session, "Quit the session"),
    ActionRef("core.scroll_down", core_actions.scroll_output_down, "Scroll output down"),
    ActionRef("core.scroll_up", core_actions.scroll_output_up, "Scroll output up"),
    ActionRef("edit.left", edit_actions.move_left, "Cursor left"),
    ActionRef("edit.right", edit_actions.move_right, "Cursor right"),
    ActionRef("edit.up", edit_actions.move_up, "Cursor up"),
    ActionRef("edit.down", edit_actions.move_down, "Cursor down"),
    ActionRef("edit.word_forward", edit_actions.move_word_forward, "Next word"),
    ActionRef("edit.word_back", edit_actions.move_word_back, "Previous word"),
    ActionRef("edit.line_start", edit_actions.move_line_start, "Line start"),
    ActionRef("edit.line_end", edit_actions.move_line_end, "Line end"),
    ActionRef("edit.top", edit_actions.move_top, "First line"),
    ActionRef("edit.bottom", edit_actions.move_bottom, "Last line"),
    ActionRef("edit.backspace", edit_actions.backspace, "Delete before cursor"),
    ActionRef("edit.delete_char", edit_actions.delete_char, "Delete under cursor"),
    ActionRef("edit.delete_word_before", edit_actions.delete_word_before, "Delete word"),
    ActionRef(
        "edit.delete_word_forward", edit_actions.delete_word_forward, "Delete word"
    ),
    ActionRef(
        "edit.delete_to_start", edit_actions.delete_to_line_start, "Delete to start"
    ),
    ActionRef("edit.clear_line", edit_actions.clear_line, "Delete line"),
    ActionRef("edit.undo", edit_actions.undo, "Undo"),
    ActionRef("edit.redo", edit_actions.redo, "Redo"),
    ActionRef(
        "suggest.next", suggestion_actions.next_suggestion, "Highlight next suggestion"
    ),
    ActionRef(
        "suggest.accept", suggestion_actions.accept_suggestion, "Insert suggestion"
    ),
)

_NORMAL_TABLE: tuple[tuple[tuple[str, ...], str], ...] = (
    (("i",), "core.enter_insert"),
    (("a",), "core.append"),
    (("A",), "core.append_eol"),
    (("I",), "core.insert_bol"),
    (("o",), "core.open_below"),
    (("h",), "edit.left"),
    (("LEFT",), "edit.left"),
    (("l",), "edit.right"),
    (("RIGHT",), "edit.right"),
    (("k",), "edit.up"),
    (("UP",), "edit.up"),
    (("j",), "edit.down"),
    (("DOWN",), "edit.down"),
    (("w",), "edit.word_forward"),
    (("b",), "edit.word_back"),
    (("0",), "edit.line_start"),
    (("$",), "edit.line_end"),
    (("g", "g"), "edit.top"),
    (("G",), "edit.bottom"),
    (("x",), "edit.delete_char"),
    (("d", "d"), "edit.clear_line"),
    (("d", "w"), "edit.delete_word_forward"),
    (("u",), "edit.undo"),
    (("ctrl+r",), "edit.redo"),
    (("ENTER",), "core.submit"),
    (("ctrl+d",), "core.scroll_down"),
    (("ctrl+u",), "core.scroll_up"),
    (("q",), "core.quit"),
    (("ctrl+c",), "core.quit"),
    (("ctrl+q",), "core.quit"),
)

_INSERT_TABLE: tuple[tuple[tuple[str, ...], str], ...] = (
    (("ESC",), "core.exit_to_normal"),
    (("ENTER",), "core.submit"),
    (("BACKSPACE",), "edit.backspace"),
    (("DELETE",), "edit.delete_char"),
    (("LEFT",), "edit.left"),
    (("RIGHT",), "edit.right"),
    (("UP",), "edit.up"),
    (("DOWN",), "edit.down"),
    (("HOME",), "edit.line_start"),
    (("END",), "edit.line_end"),
    (("ctrl+w",), "edit.delete_word_before"),
    (("ctrl+u",), "edit.delete_to_start"),
    (("TAB",), "suggest.next"),
    (("ctrl+y",), "suggest.accept"),
    (("ctrl+c",), "core.quit"),
    (("ctrl+q",), "core.quit"),
)

MODE_TABLES: Mapping[Mode, tuple[tuple[tuple[str, ...], str], ...]] = {
    Mode.NORMAL: _NORMAL_TABLE,
    Mode.INSERT: _INSERT_TABLE,
}


def _bindings_for(mode: Mode) -> tuple[Binding, ...]:
    actions = {action.id: action for action in DEFAULT_ACTIONS}
    return tuple(
        Binding(
            id=f"{mode.value}:{' '.join(keys)}",
            mode=mode,
            sequence=KeySequence.from_strings(*keys),
            action_id=action_id,
            description=actions[action_id].description,
        )
        for keys, action_id in MODE_TABLES[mode]
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = tuple(
    binding for mode in Mode for binding in _bindings_for(mode)
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    modes: Sequence[Mode] | None = None,
    extra_bindings: Iterable[Binding] | None = None,
) -> None:
    """Register built-in actions, then the bindings of ``modes`` (all by default)."""

    selected = set(modes) if modes is not None else set(Mode)

    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if binding.mode in selected:
            registry.register_binding(binding, replace=replace)

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=replace)


__all__ = [
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "MODE_TABLES",
    "load_default_keymaps",
]
