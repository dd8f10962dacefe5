"""Telemetry for the REPL front-end, on top of telelog.

Only four names are used by the rest of the package: :func:`configure`,
:func:`get_logger`, :func:`record_event` and :func:`span`.

The terminal UI owns the screen while a session runs, so nothing is written
to the console unless ``MODAL_REPL_LOG_CONSOLE`` is set or the ``headless``
preset is active.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "MODAL_REPL_"
ROOT_LOGGER = "modal_repl"

PRESETS = ("development", "production", "headless")

_TRUTHY = frozenset({"1", "true", "yes", "on"})

_loggers: Dict[str, Any] = {}
_config: Optional[Any] = None


@dataclass(frozen=True)
class TelemetrySettings:
    """Logging switches read from ``MODAL_REPL_*`` environment variables."""

    level: str = "WARNING"
    console: bool = False
    color: bool = True
    json: bool = False
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "TelemetrySettings":
        source = os.environ if env is None else env

        def flag(name: str, default: bool) -> bool:
            raw = source.get(ENV_PREFIX + name)
            return default if raw is None else raw.strip().lower() in _TRUTHY

        return cls(
            level=(source.get(ENV_PREFIX + "LOG_LEVEL") or "WARNING").upper(),
            console=flag("LOG_CONSOLE", False),
            color=not flag("NO_COLOR", False),
            json=flag("LOG_JSON", False),
            log_file=source.get(ENV_PREFIX + "LOG_FILE") or None,
        )


def build_config(
    settings: TelemetrySettings, *, preset: Optional[str] = None
) -> Any:
    """Translate ``settings`` (adjusted by ``preset``) into a ``telelog.Config``."""

    config = tl.Config()
    if preset is None:
        config.with_min_level(settings.level)
        config.with_console_output(settings.console)
        if settings.console:
            config.with_colored_output(settings.color)
        if settings.json:
            config.with_json_format(True)
        if settings.log_file:
            config.with_file_output(settings.log_file)
    elif preset == "development":
        config.with_min_level("DEBUG")
        config.with_console_output(False)
        config.with_file_output(settings.log_file or "modal_repl-debug.log")
    elif preset == "production":
        config.with_min_level("INFO")
        config.with_console_output(False)
        config.with_file_output(settings.log_file or "modal_repl.log")
        config.with_buffering(True)
    elif preset == "headless":
        config.with_min_level(settings.level)
        config.with_console_output(True)
        config.with_colored_output(False)
    else:
        raise ValueError(f"Unknown preset '{preset}'. Expected one of {PRESETS}.")

    # spans rely on logger.profile
    config.with_profiling(True)
    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Swap the active telelog configuration and drop cached loggers.

    Pass an explicit ``telelog.Config`` or the name of one of
    :data:`PRESETS`, not both. With neither, the configuration is rebuilt
    from the environment.
    """

    global _config
    if config is not None and preset is not None:
        raise ValueError("Provide either `config` or `preset`, not both.")
    _config = config or build_config(TelemetrySettings.from_env(), preset=preset)
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    global _config
    key = name or ROOT_LOGGER
    logger = _loggers.get(key)
    if logger is None:
        if _config is None:
            _config = build_config(TelemetrySettings.from_env())
        logger = _loggers[key] = tl.Logger.with_config(key, _config)
    return logger


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _pairs(payload: Mapping[str, Any]) -> List[Tuple[str, str]]:
    return [(str(key), _text(value)) for key, value in payload.items()]


def _emit(logger: Any, level: str, message: str, payload: Mapping[str, Any]) -> None:
    """Log ``message`` with ``payload``, preferring telelog's ``<level>_with``."""

    name = str(level).lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, _pairs(payload))
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(_pairs(payload))}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Mapping[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` carrying ``data``."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.name, **self.metadata}
        if self.component:
            payload["component"] = self.component
        payload["reason"] = reason
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the enclosed block under ``name``.

    ``component`` tracks the block as a telelog component: ``True`` uses
    ``name`` as its identifier and a string names it. ``metadata`` is added
    as logger context for the duration of the block. An exception escaping
    the block is logged as ``span::fail`` and re-raised.
    """

    logger = get_logger(logger_name)
    component_name = name if component is True else (component or None)
    handle = SpanHandle(
        logger=logger,
        name=name,
        component=component_name,
        metadata={key: _text(value) for key, value in (metadata or {}).items()},
    )

    with ExitStack() as stack:
        for key, value in handle.metadata.items():
            logger.add_context(key, value)
            stack.callback(logger.remove_context, key)
        if handle.component:
            stack.enter_context(logger.track_component(handle.component))
        stack.enter_context(logger.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


configure()

__all__ = [
    "ENV_PREFIX",
    "PRESETS",
    "SpanHandle",
    "TelemetrySettings",
    "build_config",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
