"""
Mode state machine that owns the active puzzle session and learner progress.
"""

from __future__ import annotations

import functools
import logging
import random
from collections.abc import Callable
from typing import Any, Protocol

from factorbugs.core import tracker
from factorbugs.core.analyzer import analyze, random_number
from factorbugs.core.builder import apply_build_action
from factorbugs.core.config import FactorBugsConfig, get_config
from factorbugs.core.facts import build_number_facts
from factorbugs.core.models import AnswerSlots, Progress, Session
from factorbugs.core.types import (
    BuildAction,
    GameMode,
    InvalidEventError,
    Response,
    ResponseType,
    SlotKind,
)
from factorbugs.core.validation import check_shape, validate_answers

logger = logging.getLogger(__name__)

ALREADY_SOLVED_MESSAGE = "You already solved this one! Ask for a new bug to keep going."
OUT_OF_RANGE_MESSAGE = "Pick a number from 1 to 100 to check a bug."
CELEBRATION_PENDING_MESSAGE = "Answer the celebration first: type 'yes' or 'no'."

MASTERY_MESSAGES = {
    GameMode.GUIDED: (
        "Congratulations!",
        "You've mastered {threshold} bugs! Ready for a new challenge? "
        "Move on to Creative Mode to test your skills!",
    ),
    GameMode.CREATIVE: (
        "You're a Bug Master!",
        "Wow! You've solved {threshold} factor bugs! You're a true bug master! "
        "Your score will now reset so you can play again.",
    ),
}


class RevealTimer(Protocol):
    """Handle for a running reveal timer."""

    def stop(self) -> None: ...


RevealScheduler = Callable[[Callable[[], None]], RevealTimer]


def _coerce(enum_type, value, label: str):
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError:
        raise InvalidEventError(f"Unknown {label}: {value!r}") from None


def boundary_event(method):
    """Convert boundary misuse into ERROR responses instead of raising."""

    @functools.wraps(method)
    def wrapper(self: FactorBugsEngine, *args: Any, **kwargs: Any) -> Response:
        try:
            return method(self, *args, **kwargs)
        except InvalidEventError as exc:
            logger.debug(f"Rejected {method.__name__} in {self.mode.value} mode: {exc}")
            return Response(
                type=ResponseType.ERROR,
                content=str(exc),
                metadata={"event": method.__name__, "mode": self.mode.value},
            )

    return wrapper


class FactorBugsEngine:
    """Watch / Guided / Creative state machine.

    Frontends send events (``select_mode``, ``select_number``,
    ``set_answer_value``, ``build_action``, ``check_answers``, ``tick``) and
    draw whatever ``snapshot()`` returns. Progress lives only as long as the
    current mode visit.
    """

    def __init__(
        self,
        config: FactorBugsConfig | None = None,
        *,
        scheduler: RevealScheduler | None = None,
        rng: random.Random | None = None,
        mode: GameMode | str | None = None,
        number: int | None = None,
    ):
        self.config = config or get_config()
        self._scheduler = scheduler
        self._rng = rng
        self._timer: RevealTimer | None = None
        self._generation = 0
        self._pending_response: Response | None = None

        self.progress = Progress()
        self.mastery_pending = False
        self.session = Session(mode=GameMode.WATCH)

        initial_mode = _coerce(GameMode, mode, "mode") if mode is not None else self.config.initial_mode
        self._enter_mode(initial_mode, number)

    # -- lifecycle -----------------------------------------------------------

    @property
    def mode(self) -> GameMode:
        return self.session.mode

    def close(self) -> None:
        """Stop any running reveal timer."""
        self._stop_timer()
        self._generation += 1

    def __enter__(self) -> FactorBugsEngine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_pending_response(self) -> Response | None:
        """Pop the response queued behind a mastery announcement."""
        response = self._pending_response
        self._pending_response = None
        return response

    def snapshot(self) -> dict[str, Any]:
        """Everything a frontend needs to draw the current state."""
        data = self.session.to_dict()
        data["progress"] = self.progress.to_dict()
        data["mastery_pending"] = self.mastery_pending
        data["facts"] = build_number_facts(self.session.structure) if self.session.structure else None
        return data

    # -- internal transitions ------------------------------------------------

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def _enter_mode(self, mode: GameMode, number: int | None = None) -> None:
        logger.debug(f"Entering {mode.value} mode")
        self.progress = tracker.reset()
        self.mastery_pending = False
        self._pending_response = None

        if mode is GameMode.CREATIVE:
            self._start_number(mode, number if number is not None else random_number(self._rng))
        elif mode is GameMode.WATCH:
            self._start_number(mode, number if number is not None else self.config.watch_default_number)
        else:
            self._start_number(mode, number if number is not None else self.config.guided_default_number)

    def _start_number(self, mode: GameMode, number: int) -> None:
        self._stop_timer()
        self._generation += 1

        structure = analyze(number)
        if mode is GameMode.WATCH:
            answers = None
        elif mode is GameMode.GUIDED:
            answers = AnswerSlots.for_structure(structure)
        else:
            # Creative bugs start with antennae only; the learner builds the rest.
            answers = AnswerSlots()

        self.session = Session(mode=mode, number=number, structure=structure, answers=answers)
        logger.debug(f"Started {mode.value} bug for {number} ({structure.type.value})")

        if mode is GameMode.WATCH and self._scheduler is not None and structure.reveal_total > 0:
            generation = self._generation

            def _on_timer() -> None:
                if generation != self._generation:
                    return
                self._advance_reveal()

            self._timer = self._scheduler(_on_timer)

    def _advance_reveal(self) -> bool:
        session = self.session
        total = session.structure.reveal_total if session.structure else 0
        if session.reveal_step >= total:
            self._stop_timer()
            return False
        session.reveal_step += 1
        if session.reveal_step >= total:
            self._stop_timer()
        return True

    def _require_mode(self, *modes: GameMode) -> None:
        if self.mode not in modes:
            allowed = " or ".join(mode.value for mode in modes)
            raise InvalidEventError(f"That only works in {allowed} mode.")

    def _state_response(self, response_type: ResponseType, **extra: Any) -> Response:
        content = self.snapshot()
        content.update(extra)
        return Response(
            type=response_type,
            content=content,
            metadata={"mode": self.mode.value, "number": self.session.number},
        )

    # -- inbound events ------------------------------------------------------

    @boundary_event
    def select_mode(self, mode: GameMode | str) -> Response:
        self._enter_mode(_coerce(GameMode, mode, "mode"))
        return self._state_response(ResponseType.MODE)

    @boundary_event
    def select_number(self, number: int) -> Response:
        self._require_mode(GameMode.WATCH, GameMode.GUIDED)
        if isinstance(number, bool) or not isinstance(number, int):
            raise InvalidEventError(f"Numbers must be whole numbers, got {number!r}.")
        self._start_number(self.mode, number)
        return self._state_response(ResponseType.BUG)

    @boundary_event
    def request_new_creative_number(self) -> Response:
        self._require_mode(GameMode.CREATIVE)
        self._start_number(GameMode.CREATIVE, random_number(self._rng))
        return self._state_response(ResponseType.BUG)

    @boundary_event
    def set_answer_value(
        self,
        slot_kind: SlotKind | str,
        slot_index: int,
        sub_index: int,
        raw_text: str,
    ) -> Response:
        self._require_mode(GameMode.GUIDED, GameMode.CREATIVE)
        kind = _coerce(SlotKind, slot_kind, "slot kind")
        if not isinstance(raw_text, str):
            raise InvalidEventError(f"Slot values must be text, got {raw_text!r}.")
        self.session.answers = self.session.answers.with_value(kind, slot_index, sub_index, raw_text)
        return self._state_response(ResponseType.ANSWER)

    @boundary_event
    def build_action(self, action: BuildAction | str) -> Response:
        self._require_mode(GameMode.CREATIVE)
        build = _coerce(BuildAction, action, "build action")
        session = self.session
        session.answers = apply_build_action(session.answers, build)
        # Reshaping invalidates the last check.
        session.correctness = None
        session.revealed = False
        session.message = ""
        return self._state_response(ResponseType.BUILD, action=build.value)

    @boundary_event
    def tick(self) -> Response:
        self._require_mode(GameMode.WATCH)
        advanced = self._advance_reveal()
        return self._state_response(ResponseType.REVEAL, advanced=advanced)

    @boundary_event
    def check_answers(self) -> Response:
        """Validate the current bug and update progress.

        Numbers outside 1-100 have an empty structure with nothing to check, so
        they are rejected instead of counting as an empty, correct bug. Checks are
        also held back while a mastery celebration waits for an answer.
        """
        self._require_mode(GameMode.GUIDED, GameMode.CREATIVE)
        if self.mastery_pending:
            raise InvalidEventError(CELEBRATION_PENDING_MESSAGE)
        session = self.session
        structure = session.structure
        if structure.factor_count == 0:
            raise InvalidEventError(OUT_OF_RANGE_MESSAGE)

        if session.mode is GameMode.CREATIVE:
            if tracker.is_completed(self.progress, session.number):
                session.message = ALREADY_SOLVED_MESSAGE
                return self._state_response(ResponseType.CHECK, correct=None, already_solved=True)

            shape = check_shape(structure, session.answers)
            if not shape.ok:
                self.progress = tracker.record_error(self.progress)
                session.correctness = None
                session.revealed = False
                session.message = shape.message
                logger.debug(f"Shape mismatch for {session.number}: {shape}")
                return self._state_response(ResponseType.CHECK, correct=False, shape_ok=False)

        correctness, all_correct = validate_answers(structure, session.answers)
        outcome = tracker.record_check(
            self.progress,
            session.number,
            all_correct,
            session.mode,
            self.config.mastery_threshold,
        )
        self.progress = outcome.progress
        session.correctness = correctness
        session.revealed = True
        if all_correct:
            session.message = f"Success! You correctly built the factor bug for {session.number}!"
        else:
            session.message = "The factors aren't quite right. Keep trying!"
        logger.debug(f"Checked {session.number}: correct={all_correct} progress={self.progress}")

        response = self._state_response(
            ResponseType.CHECK,
            correct=all_correct,
            shape_ok=True,
            newly_completed=outcome.newly_completed,
        )
        if not outcome.mastery:
            return response

        self.mastery_pending = True
        self._pending_response = response
        title, message = MASTERY_MESSAGES[session.mode]
        return self._state_response(
            ResponseType.MASTERY,
            title=title,
            message=message.format(threshold=self.config.mastery_threshold),
            suggested_mode=GameMode.CREATIVE.value if session.mode is GameMode.GUIDED else None,
        )

    @boundary_event
    def accept_mastery_suggestion(self) -> Response:
        """Guided: move on to Creative. Creative: play again with a fresh score."""
        if not self.mastery_pending:
            raise InvalidEventError("There is no celebration to answer right now.")
        if self.mode is GameMode.GUIDED:
            self._enter_mode(GameMode.CREATIVE)
            return self._state_response(ResponseType.MODE)
        return self._play_again()

    @boundary_event
    def dismiss_mastery(self) -> Response:
        """Guided: keep practising with the current score. Creative: play again."""
        if not self.mastery_pending:
            raise InvalidEventError("There is no celebration to answer right now.")
        if self.mode is GameMode.GUIDED:
            self.mastery_pending = False
            return self._state_response(ResponseType.BUG)
        return self._play_again()

    def _play_again(self) -> Response:
        self.progress = tracker.reset()
        self.mastery_pending = False
        return self._state_response(ResponseType.BUG)
