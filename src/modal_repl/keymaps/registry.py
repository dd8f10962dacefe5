"""Action catalogue plus one explicit chord table per mode."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from modal_repl.modes.base_mode import Mode
from modal_repl.runtime.telemetry import span

from .models import ActionRef, Binding


@dataclass(frozen=True, slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    modes: Tuple[Mode, ...]


class KeymapConflictError(RuntimeError):
    """A chord is already bound to a different binding in the same mode."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]) -> None:
        self.binding = binding
        self.conflicts = tuple(conflicts)
        taken = ", ".join(existing.id for existing in self.conflicts)
        super().__init__(
            f"'{binding.key_signature}' in {binding.mode.value} mode is taken by "
            f"{taken}; cannot add '{binding.id}'"
        )


class KeymapRegistry:
    """Owns the action catalogue and the chord tables.

    Each mode maps a chord signature to at most one binding. Every change to
    the tables bumps :meth:`revision` so resolvers know to recompile.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._logger_name = logger_name
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._tables: Dict[Mode, Dict[str, Binding]] = {mode: {} for mode in Mode}
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    # -- actions ---------------------------------------------------------

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if action.id in self._actions and not replace:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def get_action(self, action_id: str) -> ActionRef:
        action = self._actions.get(action_id)
        if action is None:
            raise KeyError(f"Action '{action_id}' is not registered")
        return action

    # -- bindings --------------------------------------------------------

    def get_binding(self, binding_id: str) -> Binding:
        binding = self._bindings.get(binding_id)
        if binding is None:
            raise KeyError(f"Binding '{binding_id}' is not registered")
        return binding

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "mode": binding.mode.value},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.add_metadata("missing_action", binding.action_id)
                raise KeyError(
                    f"Binding '{binding.id}' names unknown action '{binding.action_id}'"
                )

            occupant = self._tables[binding.mode].get(binding.key_signature)
            if occupant is not None and occupant.id != binding.id:
                if not replace:
                    raise KeymapConflictError(binding, (occupant,))
                self._remove(occupant)

            previous = self._bindings.get(binding.id)
            if previous is not None:
                if not replace:
                    raise ValueError(f"Binding id '{binding.id}' already registered")
                self._remove(previous)

            self._bindings[binding.id] = binding
            self._tables[binding.mode][binding.key_signature] = binding
            self._revision += 1
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.get(binding_id)
        if binding is not None:
            self._remove(binding)
            self._revision += 1
        return binding

    def iter_bindings(self, mode: Optional[Mode] = None) -> Iterator[Binding]:
        if mode is None:
            return iter(tuple(self._bindings.values()))
        return iter(tuple(self._tables[mode].values()))

    def table(self, mode: Mode) -> Mapping[str, Binding]:
        """Chord signature to binding, for ``mode``."""

        return dict(self._tables[mode])

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            modes=tuple(mode for mode in Mode if self._tables[mode]),
        )

    def _remove(self, binding: Binding) -> None:
        del self._bindings[binding.id]
        table = self._tables[binding.mode]
        if table.get(binding.key_signature) is binding:
            del table[binding.key_signature]


__all__ = ["KeymapConflictError", "KeymapRegistry", "RegistryStats"]
