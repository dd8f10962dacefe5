"""Per-mode visual style for the editor pane."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .base_mode import Mode


class CursorShape(str, Enum):
    BLOCK = "block"
    UNDERLINE = "underline"


@dataclass(frozen=True, slots=True)
class ModeStyle:
    title: str
    border_color: str
    cursor: CursorShape


MODE_STYLES: Mapping[Mode, ModeStyle] = MappingProxyType(
    {
        Mode.NORMAL: ModeStyle("NORMAL", "#98C379", CursorShape.BLOCK),
        Mode.INSERT: ModeStyle("INSERT", "#E8B86D", CursorShape.UNDERLINE),
    }
)


def style_for(mode: Mode) -> ModeStyle:
    return MODE_STYLES[mode]
