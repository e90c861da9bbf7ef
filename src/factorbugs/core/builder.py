"""
Shape edits for building a bug in Creative mode.
"""

from dataclasses import replace

from factorbugs.core.models import AnswerSlots
from factorbugs.core.types import BuildAction, InvalidEventError


def add_leg(answers: AnswerSlots) -> AnswerSlots:
    return replace(answers, legs=(*answers.legs, ("", "")))


def remove_leg(answers: AnswerSlots) -> AnswerSlots:
    """Drop the last leg pair; a bug with no legs stays as it is."""
    if not answers.legs:
        return answers
    return replace(answers, legs=answers.legs[:-1])


def toggle_stinger(answers: AnswerSlots) -> AnswerSlots:
    return replace(answers, stinger="" if answers.stinger is None else None)


BUILD_ACTIONS = {
    BuildAction.ADD_LEG: add_leg,
    BuildAction.REMOVE_LEG: remove_leg,
    BuildAction.TOGGLE_STINGER: toggle_stinger,
}


def apply_build_action(answers: AnswerSlots, action: BuildAction) -> AnswerSlots:
    try:
        build = BUILD_ACTIONS[action]
    except KeyError:
        raise InvalidEventError(f"Unknown build action: {action!r}") from None
    return build(answers)
