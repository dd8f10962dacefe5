from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from modal_repl.config import DEFAULT_DISPATCHER, ReplConfig
from modal_repl.suggest import DEFAULT_VOCABULARY_PATH


def test_defaults() -> None:
    config = ReplConfig()

    assert config.tick_interval_ms == 250
    assert config.tick_interval == pytest.approx(0.25)
    assert config.vocabulary_path == DEFAULT_VOCABULARY_PATH
    assert config.dispatcher == DEFAULT_DISPATCHER
    assert (config.editor_height, config.suggestion_height) == (10, 2)
    assert config.log_preset is None


def test_from_env_reads_prefixed_variables(tmp_path: Path) -> None:
    env = {
        "MODAL_REPL_TICK_MS": "100",
        "MODAL_REPL_VOCABULARY": str(tmp_path / "words.json"),
        "MODAL_REPL_DISPATCHER": "pkg.module:Factory",
        "MODAL_REPL_LOG_PRESET": "headless",
    }

    config = ReplConfig.from_env(env)

    assert config.tick_interval_ms == 100
    assert config.vocabulary_path == tmp_path / "words.json"
    assert config.dispatcher == "pkg.module:Factory"
    assert config.log_preset == "headless"


def test_from_env_ignores_malformed_integers() -> None:
    config = ReplConfig.from_env({"MODAL_REPL_TICK_MS": "fast"})

    assert config.tick_interval_ms == 250


def test_from_env_reads_os_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODAL_REPL_TICK_MS", "40")

    assert ReplConfig.from_env().tick_interval_ms == 40


def test_with_overrides_skips_none() -> None:
    config = ReplConfig().with_overrides(tick_interval_ms=None, dispatcher="a:b")

    assert config.tick_interval_ms == 250
    assert config.dispatcher == "a:b"


@pytest.mark.parametrize(
    "changes",
    [
        {"tick_interval_ms": 0},
        {"editor_height": 0},
        {"suggestion_height": -1},
        {"log_preset": "verbose"},
    ],
)
def test_validate_rejects_bad_values(changes: dict) -> None:
    with pytest.raises(ValueError):
        ReplConfig(**changes).validate()


def test_cli_arguments_override_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    from modal_repl.adapters.textual.app import _parse_args, build_config

    monkeypatch.setenv("MODAL_REPL_TICK_MS", "40")
    monkeypatch.setenv("MODAL_REPL_DISPATCHER", "env.module:Factory")

    config = build_config(_parse_args(["--tick-ms", "75", "--vocabulary", "v.json"]))

    assert config.tick_interval_ms == 75
    assert config.vocabulary_path == Path("v.json")
    assert config.dispatcher == "env.module:Factory"


def test_cli_rejects_unknown_preset() -> None:
    from modal_repl.adapters.textual.app import _parse_args

    with pytest.raises(SystemExit):
        _parse_args(["--log-preset", "verbose"])
    assert isinstance(_parse_args([]), argparse.Namespace)
