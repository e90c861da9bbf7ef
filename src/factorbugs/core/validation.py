"""
Answer checking for Guided and Creative modes.

Leg pairs are matched greedily in the order the learner entered them: each
submitted pair claims the first still-unclaimed expected pair equal to it.
For numbers up to 100 no two remaining pairs are equal, so greedy matching
gives the same result as an optimal assignment. A larger number range would
need a real bipartite matching here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from factorbugs.core.models import AnswerSlots, CorrectnessResult, FactorStructure
from factorbugs.core.types import Mark

BOTH_CORRECT = (Mark.CORRECT, Mark.CORRECT)
BOTH_INCORRECT = (Mark.INCORRECT, Mark.INCORRECT)
BOTH_UNKNOWN = (Mark.UNKNOWN, Mark.UNKNOWN)

ANSWER_PATTERN = re.compile(r"^[+-]?\d+$")


def parse_answer(raw_text: str | None) -> int | None:
    """Parse slot text into an int, or None when it is not a whole number."""
    if raw_text is None:
        return None
    text = raw_text.strip()
    if not ANSWER_PATTERN.fullmatch(text):
        return None
    return int(text)


def _sorted_pair(first: str, second: str) -> tuple[int, int] | None:
    a, b = parse_answer(first), parse_answer(second)
    if a is None or b is None:
        return None
    return (a, b) if a <= b else (b, a)


def validate_answers(structure: FactorStructure, answers: AnswerSlots) -> tuple[CorrectnessResult, bool]:
    """Mark every slot and report whether the whole bug is correct."""
    antennae_marks = None
    if structure.antennae is not None:
        submitted = _sorted_pair(*answers.antennae)
        antennae_marks = BOTH_CORRECT if submitted == structure.antennae else BOTH_INCORRECT

    remaining = list(structure.legs)
    leg_marks = []
    for leg in answers.legs:
        submitted = _sorted_pair(*leg)
        if submitted is not None and submitted in remaining:
            remaining.remove(submitted)
            leg_marks.append(BOTH_CORRECT)
        else:
            leg_marks.append(BOTH_INCORRECT)
    # Expected legs the learner never built stay unchecked.
    leg_marks.extend(BOTH_UNKNOWN for _ in range(len(structure.legs) - len(answers.legs)))

    stinger_mark = None
    if structure.stinger is not None:
        stinger_mark = Mark.UNKNOWN
        if answers.stinger is not None:
            correct = parse_answer(answers.stinger) == structure.stinger
            stinger_mark = Mark.CORRECT if correct else Mark.INCORRECT

    result = CorrectnessResult(antennae=antennae_marks, legs=tuple(leg_marks), stinger=stinger_mark)

    all_correct = (
        (antennae_marks is None or antennae_marks == BOTH_CORRECT)
        and all(marks == BOTH_CORRECT for marks in leg_marks)
        and (structure.stinger is None or stinger_mark is Mark.CORRECT)
    )
    return result, all_correct


@dataclass(frozen=True)
class ShapeCheck:
    """Outcome of comparing a built bug's shape with the target's."""

    expected_legs: int
    built_legs: int
    expects_stinger: bool
    has_stinger: bool

    @property
    def legs_match(self) -> bool:
        return self.expected_legs == self.built_legs

    @property
    def stinger_matches(self) -> bool:
        return self.expects_stinger == self.has_stinger

    @property
    def ok(self) -> bool:
        return self.legs_match and self.stinger_matches

    @property
    def message(self) -> str:
        if self.ok:
            return ""
        parts = ["The bug's shape isn't quite right."]
        if not self.legs_match:
            parts.append(f"It should have {self.expected_legs} pair(s) of legs.")
        if not self.stinger_matches:
            parts.append("It needs a stinger." if self.expects_stinger else "It shouldn't have a stinger.")
        return " ".join(parts)


def check_shape(structure: FactorStructure, answers: AnswerSlots) -> ShapeCheck:
    """Compare the learner-built slot layout with the layout the number needs."""
    expected = structure.shape
    built = answers.shape
    return ShapeCheck(
        expected_legs=expected.leg_count,
        built_legs=built.leg_count,
        expects_stinger=expected.has_stinger,
        has_stinger=built.has_stinger,
    )
