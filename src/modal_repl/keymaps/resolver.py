"""Chord resolution against per-mode prefix tries."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Optional, Sequence, Tuple

from modal_repl.modes.base_mode import Mode
from modal_repl.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry


class ResolutionStatus(str, Enum):
    MATCH = "match"
    PENDING = "pending"
    MISS = "miss"


@dataclass(slots=True)
class ChordTrie:
    """Prefix tree over chord tokens; ``binding_id`` marks a complete chord."""

    binding_id: Optional[str] = None
    branches: Dict[str, "ChordTrie"] = field(default_factory=dict)

    @classmethod
    def compile(cls, bindings: Iterable[Binding]) -> "ChordTrie":
        root = cls()
        for binding in bindings:
            node = root
            for token in binding.sequence.tokens:
                node = node.branches.setdefault(token, cls())
            node.binding_id = binding.id
        return root

    def walk(self, tokens: Sequence[str]) -> Optional["ChordTrie"]:
        node: Optional[ChordTrie] = self
        for token in tokens:
            node = node.branches.get(token)
            if node is None:
                return None
        return node


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """A completed chord: the binding and the action it names."""

    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    status: ResolutionStatus
    match: Optional[ResolutionMatch] = None
    consumed: int = 0
    next_expected: Tuple[str, ...] = ()

    @classmethod
    def miss(cls) -> "ResolutionResult":
        return cls(ResolutionStatus.MISS)

    @classmethod
    def pending(cls, consumed: int, node: ChordTrie) -> "ResolutionResult":
        return cls(
            ResolutionStatus.PENDING,
            consumed=consumed,
            next_expected=tuple(sorted(node.branches)),
        )


class KeymapResolver:
    """Resolves token sequences for one mode at a time.

    A complete chord takes precedence over a longer chord sharing its
    prefix. Tries are compiled lazily per mode and recompiled after the
    registry revision changes.
    """

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._tries: Dict[Mode, Tuple[int, ChordTrie]] = {}

    def resolve(self, mode: Mode, tokens: Sequence[str]) -> ResolutionResult:
        chord = tuple(tokens)
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode.value, "chord": " ".join(chord)},
        ) as handle:
            node = self.trie(mode).walk(chord) if chord else None
            if node is None:
                result = ResolutionResult.miss()
            elif node.binding_id is not None:
                binding = self._registry.get_binding(node.binding_id)
                result = ResolutionResult(
                    ResolutionStatus.MATCH,
                    match=ResolutionMatch(
                        binding, self._registry.get_action(binding.action_id)
                    ),
                    consumed=len(chord),
                )
            elif node.branches:
                result = ResolutionResult.pending(len(chord), node)
            else:
                result = ResolutionResult.miss()
            handle.add_metadata("status", result.status.value)
            return result

    def trie(self, mode: Mode) -> ChordTrie:
        revision = self._registry.revision()
        cached = self._tries.get(mode)
        if cached is not None and cached[0] == revision:
            return cached[1]
        trie = ChordTrie.compile(self._registry.iter_bindings(mode))
        self._tries[mode] = (revision, trie)
        return trie

    def reset(self, mode: Optional[Mode] = None) -> None:
        if mode is None:
            self._tries.clear()
        else:
            self._tries.pop(mode, None)


__all__ = [
    "ChordTrie",
    "KeymapResolver",
    "ResolutionMatch",
    "ResolutionResult",
    "ResolutionStatus",
]
