"""
Score, error, and completion bookkeeping for scored modes.

Progress records are immutable; every operation returns a new one and the
engine decides which record is current.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from factorbugs.core.models import Progress
from factorbugs.core.types import GameMode

MASTERY_THRESHOLD = 10


@dataclass(frozen=True)
class TrackerOutcome:
    """Result of recording one check."""

    progress: Progress
    newly_completed: bool = False
    mastery: bool = False


def reset() -> Progress:
    return Progress()


def is_completed(progress: Progress, number: int) -> bool:
    return number in progress.completed_numbers


def record_error(progress: Progress) -> Progress:
    return replace(progress, errors=progress.errors + 1)


def reached_mastery(progress: Progress, mode: GameMode, threshold: int = MASTERY_THRESHOLD) -> bool:
    # Strict equality: only the increment that lands on the threshold counts.
    return mode.is_scored and progress.score == threshold


def record_check(
    progress: Progress,
    number: int,
    all_correct: bool,
    mode: GameMode,
    threshold: int = MASTERY_THRESHOLD,
) -> TrackerOutcome:
    """Apply one validation result to progress."""
    if not all_correct:
        return TrackerOutcome(progress=record_error(progress))

    if is_completed(progress, number):
        return TrackerOutcome(progress=progress)

    updated = replace(
        progress,
        score=progress.score + 1,
        completed_numbers=progress.completed_numbers | {number},
    )
    return TrackerOutcome(
        progress=updated,
        newly_completed=True,
        mastery=reached_mastery(updated, mode, threshold),
    )
