"""Executable Textual app that hosts the modal REPL."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence, cast

try:  # pragma: no cover - imported only when the app is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import VerticalScroll
    from textual.widgets import Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use modal_repl.adapters.textual.app"
    ) from exc

from modal_repl.config import ReplConfig
from modal_repl.dispatch import Dispatcher, EchoDispatcher, load_dispatcher
from modal_repl.modes import CursorShape, KeyInput, ModeStyle
from modal_repl.modes.editor import ModalEditor, create_default_editor
from modal_repl.runtime import telemetry
from modal_repl.runtime.layout import Frame, PaneLayout
from modal_repl.runtime.loop import RenderLoop
from modal_repl.state import DisplayColor

from .controller import SurfaceHooks, TextualSurface

WELCOME_MESSAGE = "Press i to edit and ENTER to submit. Type !help for commands."

_NAMED_KEYS = {
    "escape": "ESC",
    "enter": "ENTER",
    "return": "ENTER",
    "backspace": "BACKSPACE",
    "tab": "TAB",
    "delete": "DELETE",
}

_OUTPUT_STYLES = {
    DisplayColor.SUCCESS: "green",
    DisplayColor.ERROR: "red",
    DisplayColor.NEUTRAL: "",
}


def normalize_key(
    key: str, character: Optional[str] = None, is_printable: bool = False
) -> Optional[KeyInput]:
    """Turn a Textual key event into the editor's ``KeyInput``.

    Printable characters keep their text and use it as the key, so ``$``
    arrives as ``$`` rather than ``dollar_sign``. Named keys become upper-case
    tokens and modifiers stay lowercase (``ctrl+w``). Only ``shift`` may be
    folded into a printable character; ``alt+x`` stays a modified key.
    """

    *modifiers, base = key.split("+") if key else ("",)
    held = [modifier for modifier in modifiers if modifier != "shift"]
    if is_printable and character and not held:
        return KeyInput(key=character, text=character)
    if not base:
        return None
    if base in _NAMED_KEYS:
        name = _NAMED_KEYS[base]
    elif len(base) == 1:
        name = base
    else:
        name = base.upper()
    return KeyInput(key=name, modifiers=tuple(modifiers))


class EditorPane(Static, can_focus=True):
    """Focusable input pane that forwards every key to the REPL.

    Keys are stopped here so screen bindings such as focus cycling on
    ``tab`` never see them.
    """

    def on_key(self, event: events.Key) -> None:
        key = normalize_key(event.key, event.character, event.is_printable)
        if key is None:
            return
        event.prevent_default()
        event.stop()
        cast("ReplApp", self.app).feed_key(key)


class ReplApp(App[None], inherit_bindings=False):
    """Three-pane REPL: editor, suggestions, and output."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editor {
		height: 10;
		border: round #98C379;
		padding: 0 1;
	}

	#suggestions {
		height: 2;
		padding: 0 1;
		background: $surface-darken-1;
	}

	#output {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
	}
	"""

    def __init__(
        self,
        *,
        config: ReplConfig | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        super().__init__()
        self.repl_config = (config or ReplConfig()).validate()
        self.pane_layout = PaneLayout(
            editor_height=self.repl_config.editor_height,
            suggestion_height=self.repl_config.suggestion_height,
        )
        self.editor: ModalEditor = create_default_editor(
            dispatcher or EchoDispatcher(),
            vocabulary_path=self.repl_config.vocabulary_path,
        )
        self.editor.context.app.messages.append(WELCOME_MESSAGE)
        self.surface: TextualSurface | None = None
        self.render_loop: RenderLoop | None = None
        self._scrolled_to: tuple[tuple[str, ...], int] | None = None
        self._repl_logger = telemetry.get_logger("modal_repl.textual")

    def compose(self) -> ComposeResult:
        yield EditorPane("", id="editor")
        yield Static("", id="suggestions")
        with VerticalScroll(id="output"):
            yield Static("", id="output-text")

    def on_mount(self) -> None:
        editor_pane = self.query_one("#editor", EditorPane)
        self._size_panes(self.size.height)
        output = self.query_one("#output", VerticalScroll)
        output.border_title = "Output"
        output.can_focus = False
        editor_pane.focus()

        hooks = SurfaceHooks(
            update_editor=self._update_editor,
            update_suggestions=self._update_suggestions,
            update_output=self._update_output,
            restyle=self._restyle,
            log=self._repl_logger.debug,
        )
        self.surface = TextualSurface(hooks)
        self.render_loop = RenderLoop(
            self.surface,
            self.editor,
            tick_interval=self.repl_config.tick_interval,
            layout=self.pane_layout,
        )
        self.run_worker(self._run_loop(), name="render-loop", exclusive=True)

    def on_resize(self, event: events.Resize) -> None:
        if self.render_loop is None:
            return
        self._size_panes(event.size.height)

    def _size_panes(self, total_height: int) -> None:
        editor, suggestions, output = self.pane_layout.split(total_height)
        self.query_one("#editor", EditorPane).styles.height = editor
        self.query_one("#suggestions", Static).styles.height = suggestions
        self.query_one("#output", VerticalScroll).styles.height = output

    async def _run_loop(self) -> None:
        assert self.render_loop is not None
        await self.render_loop.run()
        self.exit()

    def feed_key(self, key: KeyInput) -> None:
        if self.surface is not None:
            self.surface.feed(key)

    # -- surface hooks ---------------------------------------------------

    def _update_editor(self, frame: Frame) -> None:
        pane = self.query_one("#editor", EditorPane)
        pane.update(self._render_buffer(frame))
        row, col = frame.cursor
        pane.border_subtitle = " ".join(frame.pending) or f"{row + 1}:{col + 1}"

    def _update_suggestions(self, frame: Frame) -> None:
        self.query_one("#suggestions", Static).update(
            Text.from_ansi(frame.suggestion_text)
        )

    def _update_output(self, frame: Frame) -> None:
        self.query_one("#output-text", Static).update(
            Text(frame.output_text, style=_OUTPUT_STYLES[frame.color])
        )
        # only follow the stored offset when it or the output changes
        target = (frame.messages, frame.scroll_position)
        if target != self._scrolled_to:
            self._scrolled_to = target
            self.query_one("#output", VerticalScroll).scroll_to(
                y=frame.scroll_position, animate=False
            )

    def _restyle(self, style: ModeStyle) -> None:
        pane = self.query_one("#editor", EditorPane)
        pane.border_title = style.title
        pane.styles.border = ("round", style.border_color)

    @staticmethod
    def _render_buffer(frame: Frame) -> Text:
        cursor_style = (
            "reverse" if frame.style.cursor is CursorShape.BLOCK else "underline"
        )
        cursor_row, cursor_col = frame.cursor
        text = Text()
        for row, line in enumerate(frame.lines):
            if row:
                text.append("\n")
            if row != cursor_row:
                text.append(line)
                continue
            text.append(line[:cursor_col])
            text.append(line[cursor_col : cursor_col + 1] or " ", style=cursor_style)
            text.append(line[cursor_col + 1 :])
        return text


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the modal REPL front-end.")
    parser.add_argument(
        "--tick-ms",
        type=int,
        default=None,
        help="Redraw interval in milliseconds (default: 250)",
    )
    parser.add_argument(
        "--vocabulary",
        default=None,
        help="JSON object whose keys are the completion terms",
    )
    parser.add_argument(
        "--dispatcher",
        default=None,
        help="Dispatcher factory as 'module:attribute'",
    )
    parser.add_argument(
        "--log-preset",
        choices=telemetry.PRESETS,
        default=None,
        help="Telemetry preset to activate",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ReplConfig:
    config = ReplConfig.from_env().with_overrides(
        tick_interval_ms=args.tick_ms,
        dispatcher=args.dispatcher,
        log_preset=args.log_preset,
    )
    if args.vocabulary:
        config = config.with_overrides(vocabulary_path=Path(args.vocabulary))
    return config.validate()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    config = build_config(args)
    if config.log_preset:
        telemetry.configure(preset=config.log_preset)
    app = ReplApp(config=config, dispatcher=load_dispatcher(config.dispatcher))
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
