"""Single-task render/poll loop driving the modal editor."""

from __future__ import annotations

import time
from typing import Callable, Optional, Protocol

from modal_repl.modes import KeyInput, ModeStyle, Pending, Quit, SwitchMode, style_for
from modal_repl.modes.editor import ModalEditor
from modal_repl.runtime import telemetry

from .layout import Frame, PaneLayout, compose_frame

Clock = Callable[[], float]


class TerminalSurface(Protocol):
    """What the loop needs from a terminal: draw, restyle, and poll."""

    def draw(self, frame: Frame) -> None: ...

    def restyle(self, style: ModeStyle) -> None: ...

    async def poll(self, timeout: float) -> Optional[KeyInput]: ...


class FrameClock:
    """Tracks the fixed redraw cadence independently of input arrival."""

    def __init__(self, interval: float, *, clock: Clock = time.monotonic) -> None:
        if interval <= 0:
            raise ValueError("tick interval must be positive")
        self.interval = interval
        self._clock = clock
        self._last_tick = clock()
        self.ticks = 0

    def elapsed(self) -> float:
        return self._clock() - self._last_tick

    def remaining(self) -> float:
        return max(0.0, self.interval - self.elapsed())

    def tick_if_due(self) -> bool:
        if self.elapsed() < self.interval:
            return False
        self._last_tick = self._clock()
        self.ticks += 1
        return True


class RenderLoop:
    """Draw, wait for input up to the next tick, apply it, repeat.

    Submissions suspend the loop inside :meth:`step`, so no further input is
    polled until the dispatch call resolves. ``Quit`` ends the loop after the
    iteration that produced it.
    """

    def __init__(
        self,
        surface: TerminalSurface,
        editor: ModalEditor,
        *,
        tick_interval: float = 0.25,
        layout: PaneLayout | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.surface = surface
        self.editor = editor
        self.layout = layout or PaneLayout()
        self.clock = FrameClock(tick_interval, clock=clock)
        self.frames = 0
        self.logger = telemetry.get_logger("modal_repl.loop")

    def draw(self) -> Frame:
        app = self.editor.context.app
        app.scroll.content_length = len(app.messages)
        frame = compose_frame(self.editor, self.layout)
        self.surface.draw(frame)
        self.frames += 1
        return frame

    async def step(self, key: KeyInput) -> bool:
        """Feed one key to the editor; returns ``True`` when the loop must stop."""

        transition = await self.editor.transition(key)
        if isinstance(transition, SwitchMode):
            if transition.target is not self.editor.mode:
                self.surface.restyle(style_for(transition.target))
            self.editor.change_mode(transition.target)
        elif isinstance(transition, Pending):
            self.logger.debug(f"pending chord {' '.join(transition.tokens)}")
        elif isinstance(transition, Quit):
            return True
        return False

    async def run(self) -> int:
        """Run until a ``Quit`` transition; returns the number of frames drawn."""

        self.surface.restyle(style_for(self.editor.mode))
        telemetry.record_event("loop.start", logger_name="modal_repl.loop")
        running = True
        while running:
            self.draw()
            key = await self.surface.poll(self.clock.remaining())
            if key is not None:
                running = not await self.step(key)
            self.clock.tick_if_due()
        telemetry.record_event(
            "loop.stop", data={"frames": self.frames}, logger_name="modal_repl.loop"
        )
        return self.frames
