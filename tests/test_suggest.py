from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from modal_repl.suggest import (
    DEFAULT_VOCABULARY_PATH,
    SuggestionEngine,
    SuggestionIndex,
    VocabularyError,
    VocabularySource,
    trailing_token,
)


def write_vocabulary(path: Path, *terms: str) -> Path:
    path.write_text(json.dumps({term: None for term in terms}), encoding="utf-8")
    return path


def make_engine(tmp_path: Path, *terms: str) -> SuggestionEngine:
    path = write_vocabulary(tmp_path / "vocabulary.json", *terms)
    return SuggestionEngine(VocabularySource(path))


def test_trailing_token_extraction() -> None:
    assert trailing_token("x = pri") == "pri"
    assert trailing_token("foo(bar_1") == "bar_1"
    assert trailing_token("foo(") is None
    assert trailing_token("") is None


def test_prefix_lookup_keeps_vocabulary_order(tmp_path: Path) -> None:
    engine = make_engine(tmp_path, "abc", "abd")

    assert engine.suggest("ab") == ["abc", "abd"]
    assert engine.suggest("x + ab") == ["abc", "abd"]


def test_no_trailing_token_returns_sentinel(tmp_path: Path) -> None:
    engine = make_engine(tmp_path, "abc", "abd")

    assert engine.suggest("") == [""]
    assert engine.suggest("ab ") == [""]


def test_unknown_prefix_returns_empty(tmp_path: Path) -> None:
    engine = make_engine(tmp_path, "abc", "abd")

    assert engine.suggest("zz") == []


def test_full_term_is_not_its_own_prefix(tmp_path: Path) -> None:
    engine = make_engine(tmp_path, "abc")

    assert engine.suggest("abc") == []


def test_index_keeps_duplicates() -> None:
    index = SuggestionIndex.build(["ab", "ab", "ac"])

    assert index.lookup("a") == ["ab", "ab", "ac"]


def test_lookup_returns_a_copy() -> None:
    index = SuggestionIndex.build(["ab"])

    index.lookup("a").append("mutated")

    assert index.lookup("a") == ["ab"]


def test_index_is_cached_until_source_changes(tmp_path: Path) -> None:
    path = write_vocabulary(tmp_path / "vocabulary.json", "abc")
    engine = SuggestionEngine(VocabularySource(path))

    engine.suggest("a")
    engine.suggest("ab")
    assert engine.builds == 1

    write_vocabulary(path, "abc", "abx")
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))

    assert engine.suggest("ab") == ["abc", "abx"]
    assert engine.builds == 2


def test_invalidate_forces_rebuild(tmp_path: Path) -> None:
    engine = make_engine(tmp_path, "abc")
    engine.suggest("a")

    engine.invalidate()
    engine.suggest("a")

    assert engine.builds == 2


def test_missing_vocabulary_raises(tmp_path: Path) -> None:
    engine = SuggestionEngine(VocabularySource(tmp_path / "missing.json"))

    with pytest.raises(VocabularyError) as excinfo:
        engine.suggest("ab")
    assert excinfo.value.path == tmp_path / "missing.json"


def test_malformed_vocabulary_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(VocabularyError, match="not valid JSON"):
        SuggestionEngine(VocabularySource(path)).suggest("ab")


def test_vocabulary_must_be_an_object(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text(json.dumps(["abc"]), encoding="utf-8")

    with pytest.raises(VocabularyError, match="JSON object"):
        SuggestionEngine(VocabularySource(path)).suggest("ab")


def test_bundled_vocabulary_loads() -> None:
    engine = SuggestionEngine(VocabularySource(DEFAULT_VOCABULARY_PATH))

    assert "print" in engine.suggest("pri")
