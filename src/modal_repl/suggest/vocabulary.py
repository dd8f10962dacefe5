"""Vocabulary source backing the completion index."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import List

DEFAULT_VOCABULARY_PATH = (
    Path(__file__).resolve().parent.parent / "resources" / "vocabulary.json"
)


class VocabularyError(RuntimeError):
    """The vocabulary file is missing, unreadable, or not a JSON object."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class VocabularySource:
    """JSON object file whose keys are the complete set of completable terms.

    Values are ignored. Key order is preserved, so terms sharing a prefix are
    suggested in file order.
    """

    def __init__(self, path: str | os.PathLike[str] = DEFAULT_VOCABULARY_PATH) -> None:
        self.path = Path(path)

    def stamp(self) -> int:
        try:
            return os.stat(self.path).st_mtime_ns
        except OSError as exc:
            raise VocabularyError("Vocabulary file not found", path=self.path) from exc

    def load_terms(self) -> List[str]:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                contents = json.load(handle)
        except OSError as exc:
            raise VocabularyError("Vocabulary file unreadable", path=self.path) from exc
        except json.JSONDecodeError as exc:
            raise VocabularyError(
                f"Vocabulary file is not valid JSON ({exc.msg})", path=self.path
            ) from exc
        if not isinstance(contents, dict):
            raise VocabularyError("Vocabulary must be a JSON object", path=self.path)
        return [str(term) for term in contents]
