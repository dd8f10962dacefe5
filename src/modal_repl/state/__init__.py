"""Application state: suggestions, message log, and display colour."""

from .app import (
    UNKNOWN_ERROR_MESSAGE,
    AppState,
    DisplayColor,
    ScrollState,
    highlight,
    strip_styles,
)

__all__ = [
    "UNKNOWN_ERROR_MESSAGE",
    "AppState",
    "DisplayColor",
    "ScrollState",
    "highlight",
    "strip_styles",
]
