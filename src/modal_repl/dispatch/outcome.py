"""Tagged results returned by the evaluation service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True, slots=True)
class Diagnostic:
    message: str


@dataclass(frozen=True, slots=True)
class Success:
    text: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CommandSuccess:
    text: Optional[str] = None


@dataclass(frozen=True, slots=True)
class UnrecognizedCommand:
    text: str


@dataclass(frozen=True, slots=True)
class ParserFailed:
    diagnostics: Tuple[Diagnostic, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "diagnostics", tuple(self.diagnostics))


@dataclass(frozen=True, slots=True)
class FileIoError:
    text: str


@dataclass(frozen=True, slots=True)
class CommandFailed:
    text: str


@dataclass(frozen=True, slots=True)
class Failure:
    text: Optional[str] = None


DispatchOutcome = Union[
    Success,
    CommandSuccess,
    UnrecognizedCommand,
    ParserFailed,
    FileIoError,
    CommandFailed,
    Failure,
]

ERROR_OUTCOMES = (ParserFailed, FileIoError, CommandFailed, Failure)


def is_error(outcome: DispatchOutcome) -> bool:
    return isinstance(outcome, ERROR_OUTCOMES)


__all__ = [
    "Diagnostic",
    "Success",
    "CommandSuccess",
    "UnrecognizedCommand",
    "ParserFailed",
    "FileIoError",
    "CommandFailed",
    "Failure",
    "DispatchOutcome",
    "is_error",
]
