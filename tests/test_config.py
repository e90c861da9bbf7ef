"""Tests for environment-driven runtime settings."""

import logging

import pytest

import factorbugs.core.config as config_module
from factorbugs.core.config import FactorBugsConfig, get_config
from factorbugs.core.types import GameMode


@pytest.fixture(autouse=True)
def reset_config_singleton():
    config_module._config = None
    yield
    config_module._config = None


def test_defaults_without_environment():
    config = FactorBugsConfig.from_env({})
    assert config == FactorBugsConfig()
    assert config.mastery_threshold == 10
    assert config.watch_default_number == 7
    assert config.guided_default_number == 12
    assert config.initial_mode is GameMode.GUIDED


def test_values_read_from_environment():
    config = FactorBugsConfig.from_env(
        {
            "FACTORBUGS_REVEAL_INTERVAL": "0.25",
            "FACTORBUGS_MASTERY_THRESHOLD": "3",
            "FACTORBUGS_WATCH_NUMBER": "36",
            "FACTORBUGS_GUIDED_NUMBER": "48",
            "FACTORBUGS_MODE": " Creative ",
        }
    )
    assert config.reveal_interval == 0.25
    assert config.mastery_threshold == 3
    assert config.watch_default_number == 36
    assert config.guided_default_number == 48
    assert config.initial_mode is GameMode.CREATIVE


@pytest.mark.parametrize(
    ("name", "raw_value", "attribute"),
    [
        ("FACTORBUGS_REVEAL_INTERVAL", "soon", "reveal_interval"),
        ("FACTORBUGS_REVEAL_INTERVAL", "-1", "reveal_interval"),
        ("FACTORBUGS_MASTERY_THRESHOLD", "0", "mastery_threshold"),
        ("FACTORBUGS_WATCH_NUMBER", "101", "watch_default_number"),
        ("FACTORBUGS_GUIDED_NUMBER", "twelve", "guided_default_number"),
        ("FACTORBUGS_MODE", "racing", "initial_mode"),
    ],
)
def test_invalid_values_fall_back_with_warning(caplog, name, raw_value, attribute):
    with caplog.at_level(logging.WARNING, logger="factorbugs.core.config"):
        config = FactorBugsConfig.from_env({name: raw_value})
    assert getattr(config, attribute) == getattr(FactorBugsConfig(), attribute)
    assert name in caplog.text


def test_blank_values_are_ignored_quietly(caplog):
    with caplog.at_level(logging.WARNING, logger="factorbugs.core.config"):
        config = FactorBugsConfig.from_env({"FACTORBUGS_MODE": "  "})
    assert config.initial_mode is GameMode.GUIDED
    assert caplog.text == ""


def test_get_config_reads_process_environment_once(monkeypatch):
    monkeypatch.setenv("FACTORBUGS_WATCH_NUMBER", "64")
    first = get_config()
    monkeypatch.setenv("FACTORBUGS_WATCH_NUMBER", "81")
    assert get_config() is first
    assert first.watch_default_number == 64


def test_engine_uses_process_config_by_default(monkeypatch):
    from factorbugs.core.engine import FactorBugsEngine

    monkeypatch.setenv("FACTORBUGS_MODE", "watch")
    monkeypatch.setenv("FACTORBUGS_WATCH_NUMBER", "36")
    engine = FactorBugsEngine()
    assert engine.mode is GameMode.WATCH
    assert engine.session.number == 36
