"""Contract between the front-end and the evaluation service."""

from __future__ import annotations

import importlib
from enum import Enum
from typing import Protocol, Sequence, runtime_checkable

from .outcome import DispatchOutcome


class ReplCommand(str, Enum):
    """Built-in commands reachable as ``!<name>`` lines."""

    HELP = "help"
    CLEAR = "clear"
    SOURCE = "source"

    @classmethod
    def parse(cls, name: str) -> "ReplCommand | None":
        try:
            return cls(name.lower())
        except ValueError:
            return None


@runtime_checkable
class Dispatcher(Protocol):
    """Evaluation boundary; both calls suspend and never raise.

    Every failure is reported as one of the ``DispatchOutcome`` variants.
    """

    async def dispatch(self, line: str) -> DispatchOutcome: ...

    async def dispatch_command(
        self, command: ReplCommand, args: Sequence[str]
    ) -> DispatchOutcome: ...


class DispatcherLoadError(RuntimeError):
    """The configured ``module:attribute`` reference could not be used."""


def load_dispatcher(reference: str) -> Dispatcher:
    """Import ``module:attribute`` and call it to build a dispatcher."""

    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise DispatcherLoadError(
            f"Dispatcher reference '{reference}' must look like 'module:attribute'"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise DispatcherLoadError(f"Cannot import '{module_name}'") from exc
    factory = getattr(module, attribute, None)
    if not callable(factory):
        raise DispatcherLoadError(
            f"'{attribute}' in '{module_name}' is missing or not callable"
        )
    try:
        dispatcher = factory()
    except TypeError as exc:
        raise DispatcherLoadError(
            f"Cannot call '{reference}' without arguments"
        ) from exc
    if not isinstance(dispatcher, Dispatcher):
        raise DispatcherLoadError(f"'{reference}' did not produce a Dispatcher")
    return dispatcher
