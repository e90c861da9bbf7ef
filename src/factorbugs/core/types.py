"""
Shared enums, response envelope, and errors for the Factor Bugs core.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class GameMode(Enum):
    """Top-level activity the learner is in."""

    WATCH = "watch"
    GUIDED = "guided"
    CREATIVE = "creative"

    @property
    def is_scored(self) -> bool:
        return self is not GameMode.WATCH


class NumberType(Enum):
    """Classification of a number by its factor structure."""

    PRIME = "prime"
    COMPOSITE = "composite"
    SQUARE = "square"

    @property
    def creature(self) -> str:
        """Name of the creature drawn for this classification."""
        if self is NumberType.PRIME:
            return "Slug"
        if self is NumberType.SQUARE:
            return "Bee"
        return "Bug"


class SlotKind(Enum):
    """Answer slot families on a factor bug."""

    ANTENNA = "antenna"
    LEG = "leg"
    STINGER = "stinger"


class BuildAction(Enum):
    """Shape edits available in Creative mode."""

    ADD_LEG = "add_leg"
    REMOVE_LEG = "remove_leg"
    TOGGLE_STINGER = "toggle_stinger"


class Mark(Enum):
    """Per-value correctness state."""

    UNKNOWN = "unknown"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class ResponseType(Enum):
    """Types of responses the engine hands to frontends."""

    BUG = "bug"
    REVEAL = "reveal"
    ANSWER = "answer"
    BUILD = "build"
    CHECK = "check"
    MODE = "mode"
    MASTERY = "mastery"
    ERROR = "error"


@dataclass
class Response:
    """Envelope returned for every inbound event."""

    type: ResponseType
    content: Any
    metadata: dict[str, Any] = field(default_factory=dict)


class FactorBugsError(Exception):
    """Base error for the Factor Bugs core."""


class InvalidEventError(FactorBugsError):
    """An inbound event does not make sense for the current session."""
