"""Prefix-index autocompletion over a vocabulary source."""

from __future__ import annotations

import re
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from modal_repl.runtime import telemetry

from .vocabulary import VocabularySource

TOKEN_RE = re.compile(r"[A-Za-z0-9_]+$")

# Returned when the query has no trailing token; distinct from "no matches".
NO_TOKEN_SENTINEL: Tuple[str, ...] = ("",)


def trailing_token(query: str) -> Optional[str]:
    match = TOKEN_RE.search(query)
    return match.group(0) if match else None


class SuggestionIndex:
    """Multimap from every proper prefix of a term to the terms sharing it."""

    def __init__(self, entries: Dict[str, List[str]]) -> None:
        self._entries = entries

    @classmethod
    def build(cls, terms: Iterable[str]) -> "SuggestionIndex":
        entries: Dict[str, List[str]] = defaultdict(list)
        for term in terms:
            for length in range(1, len(term)):
                entries[term[:length]].append(term)
        return cls(dict(entries))

    def lookup(self, prefix: str) -> List[str]:
        return list(self._entries.get(prefix, ()))

    def __len__(self) -> int:
        return len(self._entries)


class SuggestionEngine:
    """Answers completion queries from a lazily built, cached index.

    The index is rebuilt only when the source file's modification stamp
    changes or :meth:`invalidate` is called. Vocabulary failures propagate as
    :class:`~modal_repl.suggest.vocabulary.VocabularyError`.
    """

    def __init__(
        self, source: VocabularySource, *, logger_name: str | None = None
    ) -> None:
        self.source = source
        self._logger_name = logger_name
        self._index: Optional[SuggestionIndex] = None
        self._stamp: Optional[int] = None
        self.builds = 0

    def suggest(self, query: str) -> List[str]:
        index = self._ensure_index()
        token = trailing_token(query)
        if token is None:
            return list(NO_TOKEN_SENTINEL)
        return index.lookup(token)

    def invalidate(self) -> None:
        self._index = None
        self._stamp = None

    def _ensure_index(self) -> SuggestionIndex:
        stamp = self.source.stamp()
        if self._index is not None and stamp == self._stamp:
            return self._index

        with telemetry.span(
            "suggest::build_index",
            logger_name=self._logger_name,
            component="suggest",
            metadata={"path": self.source.path},
        ) as handle:
            terms = self.source.load_terms()
            index = SuggestionIndex.build(terms)
            handle.add_metadata("terms", len(terms))
            handle.add_metadata("prefixes", len(index))

        self._index = index
        self._stamp = stamp
        self.builds += 1
        return index
