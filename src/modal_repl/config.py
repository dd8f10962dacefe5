"""Session configuration read from the environment and the command line."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from modal_repl.runtime.telemetry import ENV_PREFIX, PRESETS
from modal_repl.suggest import DEFAULT_VOCABULARY_PATH

DEFAULT_DISPATCHER = "modal_repl.dispatch.echo:EchoDispatcher"


def _env_int(env: Mapping[str, str], key: str, fallback: int) -> int:
    value = env.get(key)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


@dataclass(frozen=True)
class ReplConfig:
    """Settings for one REPL session."""

    tick_interval_ms: int = 250
    vocabulary_path: Path = DEFAULT_VOCABULARY_PATH
    dispatcher: str = DEFAULT_DISPATCHER
    editor_height: int = 10
    suggestion_height: int = 2
    log_preset: Optional[str] = None

    @property
    def tick_interval(self) -> float:
        return self.tick_interval_ms / 1000

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ReplConfig":
        source = os.environ if env is None else env
        defaults = cls()
        vocabulary = source.get(f"{ENV_PREFIX}VOCABULARY")
        return cls(
            tick_interval_ms=_env_int(
                source, f"{ENV_PREFIX}TICK_MS", defaults.tick_interval_ms
            ),
            vocabulary_path=Path(vocabulary) if vocabulary else defaults.vocabulary_path,
            dispatcher=source.get(f"{ENV_PREFIX}DISPATCHER") or defaults.dispatcher,
            log_preset=source.get(f"{ENV_PREFIX}LOG_PRESET") or None,
        )

    def with_overrides(self, **changes: object) -> "ReplConfig":
        """Copy with every non-``None`` value in ``changes`` applied."""

        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def validate(self) -> "ReplConfig":
        if self.tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be positive")
        if self.editor_height <= 0 or self.suggestion_height <= 0:
            raise ValueError("pane heights must be positive")
        if self.log_preset is not None and self.log_preset not in PRESETS:
            raise ValueError(
                f"Unknown log preset '{self.log_preset}'. Expected one of {PRESETS}."
            )
        return self


__all__ = ["DEFAULT_DISPATCHER", "ReplConfig"]
