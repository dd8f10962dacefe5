"""Completion suggestions from a prefix index over a vocabulary."""

from .engine import (
    NO_TOKEN_SENTINEL,
    SuggestionEngine,
    SuggestionIndex,
    trailing_token,
)
from .vocabulary import DEFAULT_VOCABULARY_PATH, VocabularyError, VocabularySource

__all__ = [
    "NO_TOKEN_SENTINEL",
    "SuggestionEngine",
    "SuggestionIndex",
    "trailing_token",
    "DEFAULT_VOCABULARY_PATH",
    "VocabularyError",
    "VocabularySource",
]
