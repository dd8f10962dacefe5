from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List, Sequence

import pytest

from modal_repl.buffer import TextBuffer
from modal_repl.dispatch import (
    CommandFailed,
    CommandSuccess,
    Diagnostic,
    DispatchOutcome,
    Failure,
    FileIoError,
    ParserFailed,
    ReplCommand,
    Success,
    UnrecognizedCommand,
)
from modal_repl.runtime import telemetry
from modal_repl.state import (
    UNKNOWN_ERROR_MESSAGE,
    AppState,
    DisplayColor,
    highlight,
    strip_styles,
)
from modal_repl.suggest import SuggestionEngine, VocabularySource


class FixedDispatcher:
    def __init__(self, outcome: DispatchOutcome) -> None:
        self.outcome = outcome
        self.lines: List[str] = []

    async def dispatch(self, line: str) -> DispatchOutcome:
        self.lines.append(line)
        return self.outcome

    async def dispatch_command(
        self, command: ReplCommand, args: Sequence[str]
    ) -> DispatchOutcome:
        return self.outcome


def make_state(tmp_path: Path) -> AppState:
    path = tmp_path / "vocabulary.json"
    path.write_text(json.dumps({"abc": 1, "abd": 2, "abe": 3}), encoding="utf-8")
    return AppState(SuggestionEngine(VocabularySource(path)))


def submit(state: AppState, outcome: DispatchOutcome, lines=("x",)) -> FixedDispatcher:
    dispatcher = FixedDispatcher(outcome)
    asyncio.run(state.submit_message(list(lines), dispatcher))
    return dispatcher


def test_iterate_suggestion_cycles(tmp_path: Path) -> None:
    state = make_state(tmp_path)
    state.suggest("ab")

    seen = []
    for _ in range(4):
        state.iterate_suggestion()
        seen.append(state.current_suggestion)

    assert seen == [1, 2, 0, 1]


def test_iterate_suggestion_on_sentinel_stays_put(tmp_path: Path) -> None:
    state = make_state(tmp_path)
    state.suggest("")

    state.iterate_suggestion()

    assert state.current_suggestion == 0
    assert strip_styles(state.suggestions[0]) == ""


def test_iterate_suggestion_requires_entries(tmp_path: Path) -> None:
    state = make_state(tmp_path)

    with pytest.raises(IndexError):
        state.iterate_suggestion()


def test_highlight_marks_exactly_one_entry(tmp_path: Path) -> None:
    state = make_state(tmp_path)
    state.suggest("ab")

    state.highlight_current_suggestion()
    state.highlight_current_suggestion()
    state.iterate_suggestion()

    assert state.suggestions == ["abc", highlight("abd"), "abe"]


def test_strip_styles_is_idempotent() -> None:
    styled = highlight("abc")

    assert strip_styles(styled) == "abc"
    assert strip_styles(strip_styles(styled)) == "abc"


def test_choose_suggestion_on_empty_list_leaves_buffer(tmp_path: Path) -> None:
    state = make_state(tmp_path)
    buffer = TextBuffer.from_text("zz")
    state.suggest("zz")

    assert state.choose_suggestion(buffer) is False
    assert buffer.text == "zz"
    assert len(buffer.undo_timeline) == 0


def test_choose_suggestion_inserts_sanitized_text(tmp_path: Path) -> None:
    state = make_state(tmp_path)
    buffer = TextBuffer.from_text("x = ab")
    state.suggest(buffer.line_before_cursor())
    state.current_suggestion = 1

    state.highlight_current_suggestion()
    assert state.choose_suggestion(buffer) is True

    assert buffer.text == "x = abd"
    assert state.suggestions == ["abc", "abd", "abe"]


def test_submit_joins_lines_without_separator(tmp_path: Path) -> None:
    state = make_state(tmp_path)

    dispatcher = submit(state, Success(None), lines=("a", "b", "c"))

    assert dispatcher.lines == ["abc"]


@pytest.mark.parametrize(
    ("outcome", "messages", "color"),
    [
        (Success("ok"), ["ok"], DisplayColor.SUCCESS),
        (CommandSuccess("done"), ["done"], DisplayColor.SUCCESS),
        (Success(None), [], DisplayColor.NEUTRAL),
        (CommandSuccess(None), [], DisplayColor.NEUTRAL),
        (UnrecognizedCommand("huh"), ["huh"], DisplayColor.NEUTRAL),
        (
            ParserFailed((Diagnostic("a"), Diagnostic("b"))),
            ["a", "b"],
            DisplayColor.ERROR,
        ),
        (FileIoError("io"), ["io"], DisplayColor.ERROR),
        (CommandFailed("cmd"), ["cmd"], DisplayColor.ERROR),
        (Failure("boom"), ["boom"], DisplayColor.ERROR),
        (Failure(None), [UNKNOWN_ERROR_MESSAGE], DisplayColor.NEUTRAL),
    ],
)
def test_submit_maps_every_outcome(
    tmp_path: Path,
    outcome: DispatchOutcome,
    messages: List[str],
    color: DisplayColor,
) -> None:
    state = make_state(tmp_path)
    state.messages = ["stale"]

    submit(state, outcome)

    assert state.messages == messages
    assert state.color is color


def test_unchanged_color_is_kept_from_previous_submit(tmp_path: Path) -> None:
    state = make_state(tmp_path)
    submit(state, Failure("first"))

    submit(state, Failure(None))

    assert state.messages == [UNKNOWN_ERROR_MESSAGE]
    assert state.color is DisplayColor.ERROR


def test_unknown_outcome_is_a_defect(tmp_path: Path) -> None:
    state = make_state(tmp_path)

    with pytest.raises(TypeError):
        submit(state, object())  # type: ignore[arg-type]


def test_scroll_output_is_clamped(tmp_path: Path) -> None:
    state = make_state(tmp_path)
    submit(state, ParserFailed([Diagnostic(str(n)) for n in range(3)]))

    state.scroll_output(10)
    assert state.scroll.position == 2
    state.scroll_output(-10)
    assert state.scroll.position == 0

    state.scroll_output(1)
    submit(state, Success("reset"))
    assert state.scroll.position == 0


def test_scroll_output_reaches_lines_of_one_long_message(tmp_path: Path) -> None:
    state = make_state(tmp_path)
    submit(state, CommandSuccess("\n".join(f"line {n}" for n in range(50))))

    assert len(state.messages) == 1
    assert state.output_line_count == 50

    state.scroll_output(5)
    assert state.scroll.position == 5
    state.scroll_output(100)
    assert state.scroll.position == 49


def test_error_outcomes_emit_event(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    events = []
    monkeypatch.setattr(
        telemetry,
        "record_event",
        lambda name, **kwargs: events.append((name, kwargs["data"])),
    )
    state = make_state(tmp_path)

    submit(state, Success("fine"))
    submit(state, CommandFailed("boom"))

    assert events == [("dispatch.error", {"outcome": "CommandFailed"})]
