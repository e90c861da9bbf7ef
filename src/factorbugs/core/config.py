"""Runtime settings for Factor Bugs, read from ``FACTORBUGS_*`` environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from factorbugs.core.analyzer import is_in_range
from factorbugs.core.tracker import MASTERY_THRESHOLD
from factorbugs.core.types import GameMode

logger = logging.getLogger(__name__)

ENV_PREFIX = "FACTORBUGS_"


@dataclass(frozen=True)
class FactorBugsConfig:
    """Tunable defaults for the engine and frontends."""

    reveal_interval: float = 0.7
    mastery_threshold: int = MASTERY_THRESHOLD
    watch_default_number: int = 7
    guided_default_number: int = 12
    initial_mode: GameMode = GameMode.GUIDED

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> FactorBugsConfig:
        """Build config from environment, keeping defaults for missing or invalid values."""
        env = os.environ if environ is None else environ
        defaults = cls()

        return cls(
            reveal_interval=_read(env, "REVEAL_INTERVAL", float, defaults.reveal_interval, lambda v: v > 0),
            mastery_threshold=_read(env, "MASTERY_THRESHOLD", int, defaults.mastery_threshold, lambda v: v > 0),
            watch_default_number=_read(env, "WATCH_NUMBER", int, defaults.watch_default_number, is_in_range),
            guided_default_number=_read(env, "GUIDED_NUMBER", int, defaults.guided_default_number, is_in_range),
            initial_mode=_read(env, "MODE", _parse_mode, defaults.initial_mode, lambda _v: True),
        )


def _parse_mode(raw_value: str) -> GameMode:
    return GameMode(raw_value.strip().lower())


def _read(env, name, parse, default, is_valid):
    raw_value = env.get(ENV_PREFIX + name)
    if raw_value is None or not raw_value.strip():
        return default
    try:
        value = parse(raw_value)
    except ValueError:
        logger.warning(f"Ignoring {ENV_PREFIX}{name}={raw_value!r}: not a valid value.")
        return default
    if not is_valid(value):
        logger.warning(f"Ignoring {ENV_PREFIX}{name}={raw_value!r}: out of range.")
        return default
    return value


_config: FactorBugsConfig | None = None


def get_config() -> FactorBugsConfig:
    """Return the process-wide config, loading it on first use."""
    global _config
    if _config is None:
        _config = FactorBugsConfig.from_env()
    return _config
