from __future__ import annotations

from modal_repl.keymaps import (
    ActionRef,
    Binding,
    KeySequence,
    KeymapRegistry,
    KeymapResolver,
    KeyStroke,
    ChordTrie,
    ResolutionStatus,
)
from modal_repl.modes import Mode


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    mode: Mode = Mode.NORMAL,
    keys: tuple[str, ...] = ("g", "g"),
    action_id: str = "core.test",
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.from_strings(*keys),
        action_id=action_id,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    action_ids = {binding.action_id for binding in bindings}
    for action_id in action_ids:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_keystroke_parse_modifiers() -> None:
    assert KeyStroke.parse("ctrl+w").token == "ctrl+w"
    assert KeyStroke.parse("shift+ctrl+TAB").token == "ctrl+shift+TAB"
    assert KeyStroke.parse("+").token == "+"
    assert KeyStroke.parse("$").token == "$"


def test_resolver_matches_exact_sequence() -> None:
    binding = make_binding("normal.gg")
    resolver = KeymapResolver(build_registry([binding]))

    result = resolver.resolve(Mode.NORMAL, ("g", "g"))

    assert result.status == "match"
    assert result.match is not None
    assert result.match.binding.id == binding.id
    assert result.consumed == 2


def test_resolver_reports_pending_for_prefix() -> None:
    resolver = KeymapResolver(
        build_registry(
            [
                make_binding("normal.dd", keys=("d", "d")),
                make_binding("normal.dw", keys=("d", "w")),
            ]
        )
    )

    result = resolver.resolve(Mode.NORMAL, ("d",))

    assert result.status == "pending"
    assert result.next_expected == ("d", "w")


def test_resolver_misses_broken_prefix() -> None:
    resolver = KeymapResolver(build_registry([make_binding("normal.gg")]))

    assert resolver.resolve(Mode.NORMAL, ("g", "x")).status == "miss"
    assert resolver.resolve(Mode.NORMAL, ()).status == "miss"


def test_resolver_tables_are_per_mode() -> None:
    resolver = KeymapResolver(build_registry([make_binding("normal.gg")]))

    assert resolver.resolve(Mode.INSERT, ("g",)).status == "miss"


def test_resolver_cache_refreshes_on_revision() -> None:
    registry = build_registry([])
    resolver = KeymapResolver(registry)

    miss = resolver.resolve(Mode.NORMAL, ("x",))
    assert miss.status == "miss"

    new_binding = make_binding("normal.x", keys=("x",), action_id="core.x")
    registry.register_action(make_action("core.x"))
    registry.register_binding(new_binding)

    match = resolver.resolve(Mode.NORMAL, ("x",))
    assert match.status == "match"
    assert match.match is not None
    assert match.match.binding.id == new_binding.id


def test_chord_trie_walk() -> None:
    trie = ChordTrie.compile(
        [make_binding("normal.gg"), make_binding("normal.G", keys=("G",))]
    )

    node = trie.walk(("g",))
    assert node is not None and node.binding_id is None
    assert trie.walk(("g", "g")).binding_id == "normal.gg"
    assert trie.walk(("x",)) is None


def test_exact_chord_wins_over_longer_chord() -> None:
    resolver = KeymapResolver(
        build_registry(
            [
                make_binding("normal.g", keys=("g",), action_id="core.short"),
                make_binding("normal.gg", keys=("g", "g"), action_id="core.long"),
            ]
        )
    )

    result = resolver.resolve(Mode.NORMAL, ("g",))

    assert result.status is ResolutionStatus.MATCH
    assert result.match is not None
    assert result.match.action.id == "core.short"
