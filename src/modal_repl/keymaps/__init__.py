"""Declarative keymap registry, chord resolver, and default bindings."""

from .models import ActionRef, Binding, KeySequence, KeyStroke
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import (
    ChordTrie,
    KeymapResolver,
    ResolutionMatch,
    ResolutionResult,
    ResolutionStatus,
)
from .defaults import load_default_keymaps

__all__ = [
    "ActionRef",
    "Binding",
    "KeySequence",
    "KeyStroke",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
    "ResolutionStatus",
    "ChordTrie",
    "load_default_keymaps",
]
