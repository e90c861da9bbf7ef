"""Interactive CLI behavior tests for command dispatch and the prompt loop."""

from __future__ import annotations

from typing import Any

import pytest
from rich.console import Console

from factorbugs.cli.main import UsageError, normalize_user_input, prompt_loop, run_command
from factorbugs.cli.rich_ui import build_bug_tree, create_rich_ui, render_score_bug
from factorbugs.core.types import GameMode, ResponseType
from tests.scenario_dsl import make_engine


def _input_feeder(values: list[Any]):
    iterator = iter(values)

    def _fake_input(_prompt: str = "") -> str:
        value = next(iterator)
        if isinstance(value, BaseException):
            raise value
        return str(value)

    return _fake_input


def _recording_ui():
    return create_rich_ui(Console(record=True, width=100, color_system=None))


def _run_loop(inputs: list[Any], **engine_kwargs) -> str:
    ui = _recording_ui()
    prompt_loop(engine=make_engine(**engine_kwargs), input_func=_input_feeder(inputs), ui=ui)
    return ui.console.export_text()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("  CHECK ", "check"), ("> pick 12", "pick 12"), (">> leg 0 1 6", "leg 0 1 6"), ("", "")],
)
def test_normalize_user_input(raw, expected):
    assert normalize_user_input(raw) == expected


class TestRunCommand:
    def test_bare_number_picks_it(self):
        engine = make_engine()
        response = run_command(engine, "36")
        assert response.type == ResponseType.BUG
        assert engine.session.number == 36

    def test_slot_commands_fill_answers(self):
        engine = make_engine(number=12)
        run_command(engine, "antenna 0 1")
        run_command(engine, "antenna 1 12")
        run_command(engine, "leg 0 0 2")
        run_command(engine, "leg 0 1 6")
        run_command(engine, "leg 1 0 3")
        run_command(engine, "leg 1 1 4")
        response = run_command(engine, "check")
        assert response.content["correct"] is True
        assert engine.progress.score == 1

    def test_build_commands_in_creative(self):
        engine = make_engine(GameMode.CREATIVE, creative_numbers=[25])
        run_command(engine, "add-leg")
        run_command(engine, "stinger-toggle")
        run_command(engine, "stinger 5")
        assert engine.session.answers.shape.leg_count == 1
        assert engine.session.answers.stinger == "5"
        run_command(engine, "remove-leg")
        assert engine.session.answers.legs == ()

    def test_mode_command_switches_activity(self):
        engine = make_engine()
        response = run_command(engine, "mode watch")
        assert response.type == ResponseType.MODE
        assert engine.mode is GameMode.WATCH

    def test_show_returns_nothing(self):
        assert run_command(make_engine(), "show") is None

    @pytest.mark.parametrize("line", ["fly", "pick", "pick twelve", "leg 0", "antenna 0"])
    def test_usage_errors(self, line):
        with pytest.raises(UsageError):
            run_command(make_engine(), line)

    def test_engine_errors_come_back_as_responses(self):
        response = run_command(make_engine(), "tick")
        assert response.type == ResponseType.ERROR


class TestPromptLoop:
    def test_solving_a_bug_prints_success_and_score(self):
        output = _run_loop(
            ["antenna 0 1", "antenna 1 7", "check", "bye"],
            number=7,
        )
        assert "Factor Slug" in output
        assert "Success! You correctly built the factor bug for 7!" in output
        assert "Score: 1" in output
        assert "👋 Bye!" in output

    def test_eof_ends_loop(self):
        output = _run_loop([EOFError()])
        assert "👋 Bye!" in output

    def test_keyboard_interrupt_ends_loop(self):
        output = _run_loop(["show", KeyboardInterrupt()])
        assert "👋 Bye!" in output

    def test_help_lists_commands(self):
        output = _run_loop(["help", "quit"])
        assert "Commands" in output
        assert "stinger-toggle" in output

    def test_unknown_command_shows_error_and_continues(self):
        output = _run_loop(["fly", "exit"])
        assert "I don't know 'fly'" in output
        assert "👋 Bye!" in output

    def test_mode_mismatch_is_reported(self):
        output = _run_loop(["new", "bye"])
        assert "Oops:" in output
        assert "creative mode" in output

    def test_watch_mode_shows_facts(self):
        output = _run_loop(["tick", "tick", "bye"], mode=GameMode.WATCH, number=12)
        assert "So the factors of 12 are: 1, 2, 3, 4, 6, 12." in output
        assert "Antennae: 1 × 12" in output
        assert "2 × 6" in output

    def test_mastery_prompt_and_answer(self):
        inputs = []
        for prime in (2, 3, 5, 7, 11):
            inputs += [f"pick {prime}", "antenna 0 1", f"antenna 1 {prime}", "check"]
        inputs += ["pick 4", "antenna 0 1", "antenna 1 4", "stinger 2", "check"]
        inputs += ["pick 9", "antenna 0 1", "antenna 1 9", "stinger 3", "check"]
        inputs += ["pick 6", "antenna 0 1", "antenna 1 6", "leg 0 0 2", "leg 0 1 3", "check"]
        inputs += ["pick 8", "antenna 0 1", "antenna 1 8", "leg 0 0 2", "leg 0 1 4", "check"]
        inputs += ["pick 10", "antenna 0 1", "antenna 1 10", "leg 0 0 2", "leg 0 1 5", "check"]
        inputs += ["yes", "bye"]

        output = _run_loop(inputs, creative_numbers=[42])
        assert "Congratulations!" in output
        assert "Type 'yes' to go to Creative Mode" in output
        assert "A wild factor bug for 42 appeared!" in output

    def test_markup_in_slot_text_is_shown_literally(self):
        output = _run_loop(["antenna 0 [/b]", "check", "bye"], number=12)
        assert "[/b] × __" in output
        assert "The factors aren't quite right" in output
        assert "👋 Bye!" in output

    def test_markup_in_unknown_command_is_shown_literally(self):
        output = _run_loop(["[/x]", "bye"])
        assert "I don't know '[/x]'" in output
        assert "👋 Bye!" in output


def test_bug_tree_hides_creature_in_creative_mode():
    engine = make_engine(GameMode.CREATIVE, creative_numbers=[36])
    console = Console(record=True, width=100, color_system=None)
    console.print(build_bug_tree(engine.snapshot()))
    text = console.export_text()
    assert "wild factor bug for 36" in text
    assert "Bee" not in text


def test_score_bug_lights_one_part_per_point():
    rendered = render_score_bug({"score": 3, "errors": 2})
    assert "●●●○○○○○○○" in rendered
    assert "Errors: [bold red]2" in rendered
