"""Mode set, key input, and transition values shared by the editor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple, Union

from modal_repl.buffer import TextBuffer
from modal_repl.dispatch import Dispatcher
from modal_repl.state import AppState


class Mode(str, Enum):
    """Closed set of editor modes."""

    NORMAL = "normal"
    INSERT = "insert"

    @property
    def inserts_text(self) -> bool:
        return self is Mode.INSERT


def normalize_modifiers(modifiers: Iterable[str]) -> Tuple[str, ...]:
    values = tuple(m.strip().lower() for m in modifiers if m.strip())
    return tuple(sorted(dict.fromkeys(values)))


def key_token(key: str, modifiers: Iterable[str] = ()) -> str:
    normalized = normalize_modifiers(modifiers)
    if normalized:
        return f"{'+'.join(normalized)}+{key}"
    return key


@dataclass(frozen=True, slots=True)
class KeyInput:
    """Normalized key event passed to the editor."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: str | None = None

    @property
    def token(self) -> str:
        return key_token(self.key, self.modifiers)

    @property
    def literal(self) -> str | None:
        """Text to insert verbatim, unless a control modifier is held."""

        if not self.text or {"ctrl", "alt", "meta"} & set(
            normalize_modifiers(self.modifiers)
        ):
            return None
        return self.text


@dataclass(frozen=True, slots=True)
class SwitchMode:
    target: Mode


@dataclass(frozen=True, slots=True)
class Nop:
    pass


@dataclass(frozen=True, slots=True)
class Pending:
    tokens: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Quit:
    pass


Transition = Union[SwitchMode, Nop, Pending, Quit]


@dataclass(slots=True)
class EditorContext:
    """Services every bound action can reach."""

    buffer: TextBuffer
    app: AppState
    dispatcher: Dispatcher
