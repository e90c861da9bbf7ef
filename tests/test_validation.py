"""Tests for answer checking and Creative-mode shape checks."""

import pytest

from factorbugs.core.analyzer import analyze
from factorbugs.core.models import AnswerSlots
from factorbugs.core.types import Mark
from factorbugs.core.validation import check_shape, parse_answer, validate_answers

C = Mark.CORRECT
X = Mark.INCORRECT
U = Mark.UNKNOWN


def slots(antennae=("", ""), legs=(), stinger=None) -> AnswerSlots:
    return AnswerSlots(antennae=tuple(antennae), legs=tuple(tuple(leg) for leg in legs), stinger=stinger)


class TestParseAnswer:
    @pytest.mark.parametrize(("raw", "expected"), [("12", 12), (" 7 ", 7), ("+3", 3), ("-2", -2)])
    def test_whole_numbers(self, raw, expected):
        assert parse_answer(raw) == expected

    @pytest.mark.parametrize("raw", ["", "  ", "abc", "1.5", "1_0", "12abc", None])
    def test_unparseable_text(self, raw):
        assert parse_answer(raw) is None


class TestValidateAnswers:
    def test_order_within_pairs_does_not_matter(self):
        result, all_correct = validate_answers(
            analyze(12),
            slots(antennae=["12", "1"], legs=[["6", "2"], ["4", "3"]]),
        )
        assert all_correct is True
        assert result.antennae == (C, C)
        assert result.legs == ((C, C), (C, C))
        assert result.stinger is None

    def test_leg_order_does_not_matter(self):
        _, all_correct = validate_answers(
            analyze(12),
            slots(antennae=["1", "12"], legs=[["3", "4"], ["2", "6"]]),
        )
        assert all_correct is True

    def test_antennae_must_be_first_pair(self):
        result, all_correct = validate_answers(
            analyze(12),
            slots(antennae=["2", "6"], legs=[["1", "12"], ["3", "4"]]),
        )
        assert all_correct is False
        assert result.antennae == (X, X)
        # (1, 12) is not one of the leg pairs.
        assert result.legs == ((X, X), (C, C))

    def test_same_pair_cannot_satisfy_two_legs(self):
        result, all_correct = validate_answers(
            analyze(12),
            slots(antennae=["1", "12"], legs=[["2", "6"], ["6", "2"]]),
        )
        assert all_correct is False
        assert result.legs == ((C, C), (X, X))

    def test_unparseable_input_is_a_mismatch_not_an_error(self):
        result, all_correct = validate_answers(
            analyze(12),
            slots(antennae=["one", "12"], legs=[["two", "6"], ["", ""]]),
        )
        assert all_correct is False
        assert result.antennae == (X, X)
        assert result.legs == ((X, X), (X, X))

    def test_stinger_checked_by_exact_value(self):
        structure = analyze(36)
        legs = [["2", "18"], ["3", "12"], ["4", "9"]]

        result, all_correct = validate_answers(structure, slots(["1", "36"], legs, stinger="6"))
        assert all_correct is True
        assert result.stinger is C

        result, all_correct = validate_answers(structure, slots(["1", "36"], legs, stinger="36"))
        assert all_correct is False
        assert result.stinger is X

    def test_missing_stinger_slot_is_unchecked_and_not_correct(self):
        result, all_correct = validate_answers(
            analyze(4),
            slots(antennae=["1", "4"], stinger=None),
        )
        assert result.stinger is U
        assert all_correct is False

    def test_one_has_no_antennae_to_check(self):
        result, all_correct = validate_answers(analyze(1), slots(stinger="1"))
        assert result.antennae is None
        assert result.legs == ()
        assert result.stinger is C
        assert all_correct is True

    def test_prime_needs_only_antennae(self):
        result, all_correct = validate_answers(analyze(7), slots(antennae=["7", "1"]))
        assert result.antennae == (C, C)
        assert all_correct is True

    def test_missing_legs_stay_unknown(self):
        result, all_correct = validate_answers(analyze(12), slots(antennae=["1", "12"], legs=[["3", "4"]]))
        assert result.legs == ((C, C), (U, U))
        assert all_correct is False

    def test_extra_legs_are_incorrect(self):
        result, all_correct = validate_answers(
            analyze(7),
            slots(antennae=["1", "7"], legs=[["1", "7"]]),
        )
        assert result.legs == ((X, X),)
        assert all_correct is False

    def test_correctness_serializes_not_applicable_as_none(self):
        result, _ = validate_answers(analyze(1), slots(stinger="2"))
        assert result.to_dict() == {"antennae": None, "legs": [], "stinger": "incorrect"}


class TestCheckShape:
    def test_missing_legs_reported(self):
        check = check_shape(analyze(12), AnswerSlots())
        assert check.ok is False
        assert check.expected_legs == 2
        assert check.built_legs == 0
        assert "It should have 2 pair(s) of legs." in check.message
        assert "stinger" not in check.message

    def test_needs_stinger(self):
        check = check_shape(analyze(4), AnswerSlots(legs=()))
        assert check.legs_match is True
        assert check.stinger_matches is False
        assert check.message.endswith("It needs a stinger.")

    def test_unwanted_stinger_and_wrong_legs(self):
        check = check_shape(analyze(12), AnswerSlots(legs=(("", ""),), stinger=""))
        assert check.message == (
            "The bug's shape isn't quite right. It should have 2 pair(s) of legs. It shouldn't have a stinger."
        )

    def test_matching_shape_has_no_message(self):
        check = check_shape(analyze(36), AnswerSlots(legs=(("", ""),) * 3, stinger=""))
        assert check.ok is True
        assert check.message == ""
