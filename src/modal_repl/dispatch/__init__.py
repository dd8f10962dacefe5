"""Dispatch boundary: outcome taxonomy, protocol, and reference dispatcher."""

from .boundary import Dispatcher, DispatcherLoadError, ReplCommand, load_dispatcher
from .echo import EchoDispatcher
from .outcome import (
    CommandFailed,
    CommandSuccess,
    Diagnostic,
    DispatchOutcome,
    Failure,
    FileIoError,
    ParserFailed,
    Success,
    UnrecognizedCommand,
    is_error,
)

__all__ = [
    "Dispatcher",
    "DispatcherLoadError",
    "ReplCommand",
    "load_dispatcher",
    "EchoDispatcher",
    "CommandFailed",
    "CommandSuccess",
    "Diagnostic",
    "DispatchOutcome",
    "Failure",
    "FileIoError",
    "ParserFailed",
    "Success",
    "UnrecognizedCommand",
    "is_error",
]
