"""Value types for chords, actions, and the bindings that join them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Tuple

from modal_repl.modes.base_mode import Mode, key_token, normalize_modifiers


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """One key plus its (sorted, lowercase) modifiers."""

    key: str
    modifiers: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("a keystroke needs a key")
        object.__setattr__(self, "modifiers", normalize_modifiers(self.modifiers))

    @classmethod
    def parse(cls, notation: str) -> "KeyStroke":
        """Read ``ctrl+w`` style notation. ``+`` on its own is the plus key."""

        head, sep, tail = notation.rpartition("+")
        if not sep or not head or not tail:
            return cls(notation)
        return cls(tail, tuple(head.split("+")))

    @property
    def token(self) -> str:
        return key_token(self.key, self.modifiers)


@dataclass(frozen=True, slots=True)
class KeySequence:
    strokes: Tuple[KeyStroke, ...]

    def __post_init__(self) -> None:
        if not self.strokes:
            raise ValueError("a chord needs at least one keystroke")

    @classmethod
    def from_strings(cls, *notations: str) -> "KeySequence":
        return cls(tuple(KeyStroke.parse(n) for n in notations if n))

    @property
    def tokens(self) -> Tuple[str, ...]:
        return tuple(stroke.token for stroke in self.strokes)


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Named handler a binding can point at.

    Handlers are called as ``handler(context, match)`` and return a
    transition, ``None`` for ``Nop``, or an awaitable of either.
    """

    id: str
    handler: Callable[..., object]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("an action needs an id")
        if not callable(self.handler):
            raise TypeError(f"handler for action '{self.id}' is not callable")

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """A chord in one mode's table, pointing at an action by id."""

    id: str
    mode: Mode
    sequence: KeySequence
    action_id: str
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id or not self.action_id:
            raise ValueError("a binding needs both an id and an action_id")
        object.__setattr__(self, "mode", Mode(self.mode))

    @property
    def key_signature(self) -> str:
        """Space-joined chord tokens, the key of the mode's table."""

        return " ".join(self.sequence.tokens)


__all__ = ["ActionRef", "Binding", "KeySequence", "KeyStroke"]
