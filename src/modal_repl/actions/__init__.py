"""Actions bound to chords in the default keymaps."""

from . import core, editing, suggestions

__all__ = ["core", "editing", "suggestions"]
