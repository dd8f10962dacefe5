from __future__ import annotations

import asyncio

import pytest

from modal_repl.dispatch import (
    CommandFailed,
    CommandSuccess,
    Diagnostic,
    Dispatcher,
    DispatcherLoadError,
    EchoDispatcher,
    ParserFailed,
    ReplCommand,
    Success,
    UnrecognizedCommand,
    is_error,
    load_dispatcher,
)
from modal_repl.dispatch.echo import HELP_TEXT, check_brackets


def run(dispatcher: EchoDispatcher, line: str):
    return asyncio.run(dispatcher.dispatch(line))


def test_echo_returns_line_and_records_source() -> None:
    dispatcher = EchoDispatcher()

    assert run(dispatcher, "x = 1") == Success("x = 1")
    assert dispatcher.source == ["x = 1"]


def test_blank_line_is_silent_success() -> None:
    assert run(EchoDispatcher(), "   ") == Success(None)


def test_unbalanced_brackets_report_each_problem() -> None:
    outcome = run(EchoDispatcher(), "f(a]")

    assert outcome == ParserFailed(
        (
            Diagnostic("unexpected ']' at column 4"),
            Diagnostic("unclosed '(' at column 2"),
        )
    )
    assert is_error(outcome)


def test_check_brackets_accepts_nested() -> None:
    assert check_brackets("f([{}])") == []


def test_commands_route_through_dispatch_command() -> None:
    dispatcher = EchoDispatcher()

    assert run(dispatcher, "!help") == CommandSuccess(HELP_TEXT)
    assert run(dispatcher, "!source") == CommandFailed("Session source is empty.")

    run(dispatcher, "a")
    run(dispatcher, "b")
    assert run(dispatcher, "!SOURCE") == CommandSuccess("a\nb")
    assert run(dispatcher, "!clear") == CommandSuccess("Cleared session source.")
    assert dispatcher.source == []


def test_unknown_command() -> None:
    assert run(EchoDispatcher(), "!frobnicate now") == UnrecognizedCommand(
        "Unknown command: !frobnicate now"
    )
    assert run(EchoDispatcher(), "!") == UnrecognizedCommand("Unknown command: !")


def test_repl_command_parse() -> None:
    assert ReplCommand.parse("Help") is ReplCommand.HELP
    assert ReplCommand.parse("nope") is None


def test_load_dispatcher_builds_echo() -> None:
    dispatcher = load_dispatcher("modal_repl.dispatch.echo:EchoDispatcher")

    assert isinstance(dispatcher, EchoDispatcher)
    assert isinstance(dispatcher, Dispatcher)


@pytest.mark.parametrize(
    "reference",
    [
        "modal_repl.dispatch.echo",
        "modal_repl.no_such_module:Thing",
        "modal_repl.dispatch.echo:MISSING",
        "modal_repl.dispatch.echo:HELP_TEXT",
        "modal_repl.dispatch.echo:check_brackets",
    ],
)
def test_load_dispatcher_rejects_bad_references(reference: str) -> None:
    with pytest.raises(DispatcherLoadError):
        load_dispatcher(reference)
