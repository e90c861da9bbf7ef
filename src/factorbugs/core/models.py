"""
Data models for factor structures, answer slots, and learner progress.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from factorbugs.core.types import GameMode, InvalidEventError, Mark, NumberType, SlotKind

FactorPair = tuple[int, int]


@dataclass(frozen=True)
class CreativeShape:
    """Slot layout of a bug: how many leg pairs and whether it has a stinger."""

    leg_count: int = 0
    has_stinger: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"leg_count": self.leg_count, "has_stinger": self.has_stinger}


@dataclass(frozen=True)
class FactorStructure:
    """Factor pairs, stinger, and classification of one number."""

    number: int
    type: NumberType
    pairs: tuple[FactorPair, ...] = ()
    stinger: int | None = None

    @property
    def antennae(self) -> FactorPair | None:
        """First factor pair, drawn as the antennae."""
        return self.pairs[0] if self.pairs else None

    @property
    def legs(self) -> tuple[FactorPair, ...]:
        """Every pair after the first, drawn as legs."""
        return self.pairs[1:]

    @property
    def factor_count(self) -> int:
        return 2 * len(self.pairs) + (1 if self.stinger is not None else 0)

    @property
    def reveal_total(self) -> int:
        """Number of reveal steps Watch mode plays for this bug."""
        return len(self.pairs) + (1 if self.stinger is not None else 0)

    @property
    def shape(self) -> CreativeShape:
        return CreativeShape(
            leg_count=max(0, len(self.pairs) - 1),
            has_stinger=self.stinger is not None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "type": self.type.value,
            "creature": self.type.creature,
            "pairs": [list(pair) for pair in self.pairs],
            "stinger": self.stinger,
        }


@dataclass(frozen=True)
class AnswerSlots:
    """Raw text the learner typed into each slot of the bug."""

    antennae: tuple[str, str] = ("", "")
    legs: tuple[tuple[str, str], ...] = ()
    stinger: str | None = None

    @classmethod
    def for_shape(cls, shape: CreativeShape) -> AnswerSlots:
        """Build empty slots matching a shape."""
        return cls(
            legs=tuple(("", "") for _ in range(shape.leg_count)),
            stinger="" if shape.has_stinger else None,
        )

    @classmethod
    def for_structure(cls, structure: FactorStructure) -> AnswerSlots:
        return cls.for_shape(structure.shape)

    @property
    def shape(self) -> CreativeShape:
        return CreativeShape(leg_count=len(self.legs), has_stinger=self.stinger is not None)

    def with_value(self, kind: SlotKind, index: int, sub_index: int, raw_text: str) -> AnswerSlots:
        """Return a copy with one slot value replaced."""
        if kind is SlotKind.ANTENNA:
            return replace(self, antennae=_replace_in_pair(self.antennae, sub_index, raw_text))

        if kind is SlotKind.LEG:
            if not 0 <= index < len(self.legs):
                raise InvalidEventError(f"No leg pair at index {index}.")
            legs = list(self.legs)
            legs[index] = _replace_in_pair(legs[index], sub_index, raw_text)
            return replace(self, legs=tuple(legs))

        if kind is SlotKind.STINGER:
            if self.stinger is None:
                raise InvalidEventError("This bug has no stinger slot.")
            return replace(self, stinger=raw_text)

        raise InvalidEventError(f"Unknown slot kind: {kind!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "antennae": list(self.antennae),
            "legs": [list(leg) for leg in self.legs],
            "stinger": self.stinger,
        }


def _replace_in_pair(pair: tuple[str, str], sub_index: int, value: str) -> tuple[str, str]:
    if sub_index == 0:
        return (value, pair[1])
    if sub_index == 1:
        return (pair[0], value)
    raise InvalidEventError(f"Slot position must be 0 or 1, got {sub_index}.")


@dataclass(frozen=True)
class CorrectnessResult:
    """Per-slot marks after a check.

    ``antennae`` is ``None`` when the structure has no factor pairs, so the slot
    is not applicable. ``stinger`` is ``None`` when no stinger is expected.
    """

    antennae: tuple[Mark, Mark] | None
    legs: tuple[tuple[Mark, Mark], ...] = ()
    stinger: Mark | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "antennae": [mark.value for mark in self.antennae] if self.antennae is not None else None,
            "legs": [[mark.value for mark in leg] for leg in self.legs],
            "stinger": self.stinger.value if self.stinger is not None else None,
        }


@dataclass(frozen=True)
class Progress:
    """Score, error count, and completed numbers for one mode visit."""

    score: int = 0
    errors: int = 0
    completed_numbers: frozenset[int] = frozenset()

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "errors": self.errors,
            "completed_numbers": sorted(self.completed_numbers),
        }


@dataclass
class Session:
    """Per-number puzzle state for the active mode."""

    mode: GameMode
    number: int | None = None
    structure: FactorStructure | None = None
    answers: AnswerSlots | None = None
    correctness: CorrectnessResult | None = None
    revealed: bool = False
    reveal_step: int = 0
    message: str = ""

    @property
    def shape(self) -> CreativeShape | None:
        """Shape the learner has built (or was given) for this bug."""
        return self.answers.shape if self.answers is not None else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "number": self.number,
            "structure": self.structure.to_dict() if self.structure else None,
            "answers": self.answers.to_dict() if self.answers else None,
            "correctness": self.correctness.to_dict() if self.correctness else None,
            "revealed": self.revealed,
            "reveal_step": self.reveal_step,
            "reveal_total": self.structure.reveal_total if self.structure else 0,
            "message": self.message,
        }
