"""Modal editor: owns the buffer, the active mode, and the pending chord."""

from __future__ import annotations

import inspect
import os
from typing import List, Tuple

from modal_repl.buffer import TextBuffer
from modal_repl.dispatch import Dispatcher
from modal_repl.keymaps import (
    KeymapRegistry,
    KeymapResolver,
    ResolutionMatch,
    ResolutionStatus,
    load_default_keymaps,
)
from modal_repl.runtime import telemetry
from modal_repl.state import AppState
from modal_repl.suggest import (
    DEFAULT_VOCABULARY_PATH,
    SuggestionEngine,
    VocabularySource,
)

from .base_mode import (
    EditorContext,
    KeyInput,
    Mode,
    Nop,
    Pending,
    Transition,
)


class ModalEditor:
    """Consumes one key at a time and reports the resulting transition.

    Keys accumulate into a pending chord while they form a strict prefix of
    some binding in the active mode. When a key breaks the prefix, the chord
    is dropped and that key is resolved again on its own, so it is never
    swallowed. Unbound keys insert their text in text-inserting modes.

    Mode changes are reported as ``SwitchMode`` and applied by the caller
    through :meth:`change_mode`.
    """

    def __init__(
        self,
        context: EditorContext,
        *,
        mode: Mode = Mode.NORMAL,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.context = context
        self._mode = mode
        self._pending: List[str] = []
        self.logger = telemetry.get_logger("modal_repl.editor")
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="modal_repl.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="modal_repl.keymaps"
        )

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def pending(self) -> Tuple[str, ...]:
        return tuple(self._pending)

    @property
    def buffer(self) -> TextBuffer:
        return self.context.buffer

    def change_mode(self, mode: Mode) -> bool:
        """Make ``mode`` active; returns whether it differed from the old one."""

        self._pending.clear()
        if mode is self._mode:
            return False
        previous = self._mode
        self._mode = mode
        telemetry.record_event(
            "mode.switch",
            data={"from": previous.value, "to": mode.value},
            logger_name="modal_repl.editor",
        )
        return True

    async def transition(self, key: KeyInput) -> Transition:
        version = self.buffer.version
        with telemetry.span(
            "editor::transition",
            logger_name="modal_repl.editor",
            component=True,
            metadata={"key": key.token, "mode": self._mode.value},
        ) as handle:
            outcome = await self._process(key)
            handle.add_metadata("outcome", type(outcome).__name__)

        if self.buffer.version != version:
            self.context.app.suggest(self.buffer.line_before_cursor())
        return outcome

    async def _process(self, key: KeyInput) -> Transition:
        token = key.token
        self._pending.append(token)
        result = self.keymap_resolver.resolve(self._mode, self._pending)

        if result.status is ResolutionStatus.MATCH and result.match:
            self._pending.clear()
            return await self._execute(result.match)

        if result.status is ResolutionStatus.PENDING:
            return Pending(tuple(self._pending))

        broken_chord = len(self._pending) > 1
        self._pending.clear()

        if broken_chord:
            retry = self.keymap_resolver.resolve(self._mode, (token,))
            if retry.status is ResolutionStatus.MATCH and retry.match:
                return await self._execute(retry.match)
            if retry.status is ResolutionStatus.PENDING:
                self._pending.append(token)
                return Pending((token,))

        return self._fallback(key)

    def _fallback(self, key: KeyInput) -> Transition:
        literal = key.literal
        if self._mode.inserts_text and literal is not None:
            self.buffer.insert_text(literal)
        return Nop()

    async def _execute(self, match: ResolutionMatch) -> Transition:
        with telemetry.span(
            "keymaps::execute",
            logger_name="modal_repl.editor",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.context, match)
            if inspect.isawaitable(outcome):
                outcome = await outcome

        if outcome is None:
            return Nop()
        return outcome  # type: ignore[return-value]


def create_default_editor(
    dispatcher: Dispatcher,
    *,
    vocabulary_path: str | os.PathLike[str] = DEFAULT_VOCABULARY_PATH,
) -> ModalEditor:
    """Wire a buffer, app state, and default keymaps into a NORMAL-mode editor."""

    engine = SuggestionEngine(
        VocabularySource(vocabulary_path), logger_name="modal_repl.suggest"
    )
    context = EditorContext(
        buffer=TextBuffer(),
        app=AppState(engine, logger_name="modal_repl.state"),
        dispatcher=dispatcher,
    )
    return ModalEditor(context)
