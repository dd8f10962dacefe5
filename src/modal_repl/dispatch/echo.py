"""Reference dispatcher that echoes submitted lines back.

It evaluates nothing. It keeps the submitted lines as a session source,
checks bracket balance so parser diagnostics can be exercised, and answers
the built-in ``!`` commands.
"""

from __future__ import annotations

from typing import List, Sequence

from .boundary import ReplCommand
from .outcome import (
    CommandFailed,
    CommandSuccess,
    Diagnostic,
    DispatchOutcome,
    ParserFailed,
    Success,
    UnrecognizedCommand,
)

COMMAND_PREFIX = "!"
_PAIRS = {")": "(", "]": "[", "}": "{"}

HELP_TEXT = "\n".join(
    [
        "!help    show this message",
        "!clear   forget every line submitted so far",
        "!source  print the lines submitted so far",
    ]
)


def check_brackets(line: str) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    stack: List[tuple[str, int]] = []
    for position, char in enumerate(line):
        if char in "([{":
            stack.append((char, position))
        elif char in _PAIRS:
            if stack and stack[-1][0] == _PAIRS[char]:
                stack.pop()
            else:
                diagnostics.append(
                    Diagnostic(f"unexpected '{char}' at column {position + 1}")
                )
    for char, position in stack:
        diagnostics.append(Diagnostic(f"unclosed '{char}' at column {position + 1}"))
    return diagnostics


class EchoDispatcher:
    def __init__(self) -> None:
        self.source: List[str] = []

    async def dispatch(self, line: str) -> DispatchOutcome:
        stripped = line.strip()
        if not stripped:
            return Success(None)

        if stripped.startswith(COMMAND_PREFIX):
            parts = stripped[len(COMMAND_PREFIX) :].split()
            command = ReplCommand.parse(parts[0]) if parts else None
            if command is None:
                return UnrecognizedCommand(f"Unknown command: {stripped}")
            return await self.dispatch_command(command, parts[1:])

        diagnostics = check_brackets(line)
        if diagnostics:
            return ParserFailed(tuple(diagnostics))

        self.source.append(line)
        return Success(line)

    async def dispatch_command(
        self, command: ReplCommand, args: Sequence[str]
    ) -> DispatchOutcome:
        del args
        if command is ReplCommand.HELP:
            return CommandSuccess(HELP_TEXT)
        if command is ReplCommand.CLEAR:
            self.source.clear()
            return CommandSuccess("Cleared session source.")
        if command is ReplCommand.SOURCE:
            if not self.source:
                return CommandFailed("Session source is empty.")
            return CommandSuccess("\n".join(self.source))
        raise AssertionError(f"Unhandled command {command!r}")
