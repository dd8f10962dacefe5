"""Application state shared by the editor actions and the render loop."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

from modal_repl.buffer import TextBuffer
from modal_repl.dispatch import (
    CommandFailed,
    CommandSuccess,
    Dispatcher,
    DispatchOutcome,
    Failure,
    FileIoError,
    ParserFailed,
    Success,
    UnrecognizedCommand,
    is_error,
)
from modal_repl.runtime import telemetry
from modal_repl.suggest import SuggestionEngine

ANSI_ESCAPE_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
HIGHLIGHT_START = "\x1b[41m"
HIGHLIGHT_END = "\x1b[0m"

UNKNOWN_ERROR_MESSAGE = (
    "Unknown internal error\nPlease report this bug if it persists."
)


class DisplayColor(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    NEUTRAL = "neutral"


@dataclass(slots=True)
class ScrollState:
    """Output pane scroll offset and the number of lines it spans."""

    position: int = 0
    content_length: int = 0


def strip_styles(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def highlight(text: str) -> str:
    return f"{HIGHLIGHT_START}{text}{HIGHLIGHT_END}"


class AppState:
    """Suggestions, the message log, and output display state."""

    def __init__(
        self, engine: SuggestionEngine, *, logger_name: str | None = None
    ) -> None:
        self.engine = engine
        self.suggestions: List[str] = []
        self.current_suggestion = 0
        self.messages: List[str] = []
        self.color = DisplayColor.NEUTRAL
        self.scroll = ScrollState()
        self._logger_name = logger_name

    # -- suggestions -----------------------------------------------------

    def suggest(self, trailing_input: str) -> None:
        self.suggestions = self.engine.suggest(trailing_input)
        self.current_suggestion = 0

    def iterate_suggestion(self) -> None:
        if not self.suggestions:
            raise IndexError("iterate_suggestion() requires at least one suggestion")
        self.current_suggestion = (self.current_suggestion + 1) % len(
            self.suggestions
        )
        self.highlight_current_suggestion()

    def highlight_current_suggestion(self) -> None:
        self._clear_suggestion_styles()
        index = self.current_suggestion
        self.suggestions[index] = highlight(self.suggestions[index])

    def choose_suggestion(self, buffer: TextBuffer) -> bool:
        """Replace the partial word before the cursor with the current entry.

        Returns ``False`` without touching the buffer when there is no entry
        at the current index.
        """

        self._clear_suggestion_styles()
        if self.current_suggestion >= len(self.suggestions):
            return False
        choice = self.suggestions[self.current_suggestion]
        buffer.delete_trailing_token()
        buffer.insert_text(choice)
        return True

    def _clear_suggestion_styles(self) -> None:
        self.suggestions = [strip_styles(entry) for entry in self.suggestions]

    # -- submission ------------------------------------------------------

    async def submit_message(
        self, lines: Sequence[str], dispatcher: Dispatcher
    ) -> DispatchOutcome:
        joined = "".join(lines)
        with telemetry.span(
            "dispatch::submit",
            logger_name=self._logger_name,
            component="dispatch",
            metadata={"length": len(joined)},
        ) as handle:
            outcome = await dispatcher.dispatch(joined)
            handle.add_metadata("outcome", type(outcome).__name__)

        if is_error(outcome):
            telemetry.record_event(
                "dispatch.error",
                level="warning",
                data={"outcome": type(outcome).__name__},
                logger_name=self._logger_name,
            )
        self.messages.clear()
        self.scroll.position = 0
        self._apply_outcome(outcome)
        return outcome

    def _apply_outcome(self, outcome: DispatchOutcome) -> None:
        if isinstance(outcome, (Success, CommandSuccess)):
            if outcome.text is not None:
                self.messages.append(outcome.text)
                self.color = DisplayColor.SUCCESS
        elif isinstance(outcome, UnrecognizedCommand):
            self.messages.append(outcome.text)
        elif isinstance(outcome, ParserFailed):
            self.messages.extend(d.message for d in outcome.diagnostics)
            self.color = DisplayColor.ERROR
        elif isinstance(outcome, (FileIoError, CommandFailed)):
            self.messages.append(outcome.text)
            self.color = DisplayColor.ERROR
        elif isinstance(outcome, Failure):
            if outcome.text is not None:
                self.messages.append(outcome.text)
                self.color = DisplayColor.ERROR
            else:
                self.messages.append(UNKNOWN_ERROR_MESSAGE)
        else:
            raise TypeError(f"Unhandled dispatch outcome {outcome!r}")

    # -- output pane -----------------------------------------------------

    @property
    def output_line_count(self) -> int:
        """Lines the output pane renders; a message may span several."""

        return sum(message.count("\n") + 1 for message in self.messages)

    def scroll_output(self, delta: int) -> None:
        upper = max(0, self.output_line_count - 1)
        self.scroll.position = min(upper, max(0, self.scroll.position + delta))
