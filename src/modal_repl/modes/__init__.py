"""Mode values, key input, and transitions.

The editor itself lives in :mod:`modal_repl.modes.editor`.
"""

from .base_mode import (
    EditorContext,
    KeyInput,
    Mode,
    Nop,
    Pending,
    Quit,
    SwitchMode,
    Transition,
    key_token,
    normalize_modifiers,
)
from .styles import MODE_STYLES, CursorShape, ModeStyle, style_for

__all__ = [
    "EditorContext",
    "KeyInput",
    "Mode",
    "Nop",
    "Pending",
    "Quit",
    "SwitchMode",
    "Transition",
    "key_token",
    "normalize_modifiers",
    "MODE_STYLES",
    "CursorShape",
    "ModeStyle",
    "style_for",
]
