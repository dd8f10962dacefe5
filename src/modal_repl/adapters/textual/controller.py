"""Terminal surface that bridges the render loop to Textual widgets."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Optional

from modal_repl.modes import KeyInput, ModeStyle
from modal_repl.runtime.layout import Frame


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class SurfaceHooks:
    """Callbacks invoked by the surface to update Textual widgets."""

    update_editor: Callable[[Frame], None]
    update_suggestions: Callable[[Frame], None] = _noop
    update_output: Callable[[Frame], None] = _noop
    restyle: Callable[[ModeStyle], None] = _noop
    # Optional debug line sink
    log: Callable[[str], None] = _noop


class TextualSurface:
    """Queue-backed ``TerminalSurface``.

    The Textual app feeds normalized keys from its event handler. The render
    loop polls them with a timeout so redraw ticks keep their cadence while
    no key arrives.
    """

    def __init__(self, hooks: SurfaceHooks) -> None:
        self.hooks = hooks
        self._keys: asyncio.Queue[KeyInput] = asyncio.Queue()
        self.last_frame: Optional[Frame] = None

    def feed(self, key: KeyInput) -> None:
        self.hooks.log(f"key -> {key.token!r}")
        self._keys.put_nowait(key)

    async def poll(self, timeout: float) -> Optional[KeyInput]:
        if timeout <= 0:
            try:
                return self._keys.get_nowait()
            except asyncio.QueueEmpty:
                return None
        try:
            return await asyncio.wait_for(self._keys.get(), timeout)
        except asyncio.TimeoutError:
            return None

    def draw(self, frame: Frame) -> None:
        self.last_frame = frame
        self.hooks.update_editor(frame)
        self.hooks.update_suggestions(frame)
        self.hooks.update_output(frame)

    def restyle(self, style: ModeStyle) -> None:
        self.hooks.log(f"restyle -> {style.title}")
        self.hooks.restyle(style)


__all__ = ["SurfaceHooks", "TextualSurface"]
