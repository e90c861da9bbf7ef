import argparse
import logging
import os
import random
from collections.abc import Callable

from factorbugs.cli.rich_ui import RichUI, create_rich_ui
from factorbugs.core.engine import FactorBugsEngine
from factorbugs.core.types import GameMode, Response, ResponseType, SlotKind

# Set up logging
logger = logging.getLogger(__name__)
DEBUG = "DEBUG" in os.environ
if DEBUG:
    logging.basicConfig(level=logging.DEBUG)

EXIT_INPUTS = {"bye", "quit", "exit", ":q!"}

HELP_LINES = [
    ("mode watch|guided|creative", "Switch activity (resets your score)"),
    ("pick <n>", "Choose a number from 1 to 100 (watch and guided)"),
    ("antenna <0|1> <value>", "Fill in an antenna"),
    ("leg <pair> <0|1> <value>", "Fill in one side of a leg pair"),
    ("stinger <value>", "Fill in the stinger"),
    ("add-leg / remove-leg", "Change how many leg pairs your bug has (creative)"),
    ("stinger-toggle", "Give your bug a stinger or take it away (creative)"),
    ("check", "Check your answers"),
    ("new", "Get a new wild bug (creative)"),
    ("tick", "Reveal the next part of the bug (watch)"),
    ("show", "Draw the bug again"),
    ("yes / no", "Answer a celebration question"),
    ("bye", "Leave Factor Bugs"),
]


class UsageError(ValueError):
    pass


def _int_arg(args: list[str], position: int, name: str) -> int:
    try:
        return int(args[position])
    except (IndexError, ValueError):
        raise UsageError(f"Expected a whole number for {name}.") from None


def _text_arg(args: list[str], position: int, name: str) -> str:
    if len(args) <= position:
        raise UsageError(f"Missing {name}.")
    return args[position]


def cmd_mode(engine: FactorBugsEngine, args: list[str]) -> Response:
    return engine.select_mode(_text_arg(args, 0, "mode name").lower())


def cmd_pick(engine: FactorBugsEngine, args: list[str]) -> Response:
    return engine.select_number(_int_arg(args, 0, "the number"))


def cmd_antenna(engine: FactorBugsEngine, args: list[str]) -> Response:
    return engine.set_answer_value(SlotKind.ANTENNA, 0, _int_arg(args, 0, "antenna side"), _text_arg(args, 1, "value"))


def cmd_leg(engine: FactorBugsEngine, args: list[str]) -> Response:
    return engine.set_answer_value(
        SlotKind.LEG,
        _int_arg(args, 0, "leg pair"),
        _int_arg(args, 1, "leg side"),
        _text_arg(args, 2, "value"),
    )


def cmd_stinger(engine: FactorBugsEngine, args: list[str]) -> Response:
    return engine.set_answer_value(SlotKind.STINGER, 0, 0, _text_arg(args, 0, "value"))


COMMANDS: dict[str, Callable[[FactorBugsEngine, list[str]], Response | None]] = {
    "mode": cmd_mode,
    "pick": cmd_pick,
    "antenna": cmd_antenna,
    "leg": cmd_leg,
    "stinger": cmd_stinger,
    "add-leg": lambda engine, _args: engine.build_action("add_leg"),
    "remove-leg": lambda engine, _args: engine.build_action("remove_leg"),
    "stinger-toggle": lambda engine, _args: engine.build_action("toggle_stinger"),
    "check": lambda engine, _args: engine.check_answers(),
    "new": lambda engine, _args: engine.request_new_creative_number(),
    "tick": lambda engine, _args: engine.tick(),
    "yes": lambda engine, _args: engine.accept_mastery_suggestion(),
    "no": lambda engine, _args: engine.dismiss_mastery(),
    "show": lambda _engine, _args: None,
}


def normalize_user_input(user_input: str) -> str:
    """Normalize user input and strip pasted prompt markers like '> check'."""
    normalized = user_input.lower().strip()
    while normalized.startswith(">"):
        normalized = normalized[1:].strip()
    return normalized


def run_command(engine: FactorBugsEngine, normalized_input: str) -> Response | None:
    """Dispatch one command line to the engine."""
    name, *args = normalized_input.split()
    if name.isdigit() and not args:
        # A bare number is shorthand for "pick <n>".
        name, args = "pick", [name]
    handler = COMMANDS.get(name)
    if handler is None:
        raise UsageError(f"I don't know '{name}'. Type 'help' to see what I can do.")
    logger.debug(f"command: {name} {args}")
    return handler(engine, args)


def render(ui: RichUI, engine: FactorBugsEngine, response: Response | None) -> None:
    """Draw a response followed by any response queued behind it."""
    responses = [response]
    pending = engine.get_pending_response()
    if pending is not None:
        responses.append(pending)

    for current in responses:
        if current is not None and current.type == ResponseType.ERROR:
            ui.show_error(current.content)
            return
        if current is not None and current.type == ResponseType.MASTERY:
            ui.show_mastery(
                current.content["title"],
                current.content["message"],
                current.content.get("suggested_mode"),
            )

    snapshot = engine.snapshot()
    ui.show_bug(snapshot)
    if engine.mode is GameMode.WATCH:
        ui.show_facts(snapshot["facts"])
    else:
        ui.show_progress(snapshot["progress"])


def prompt_loop(
    prompt_text="> ",
    engine: FactorBugsEngine | None = None,
    input_func=input,
    ui: RichUI | None = None,
):
    ui = ui or create_rich_ui()
    engine = engine or FactorBugsEngine()

    with engine:
        ui.console.print("[bold green]Factor Bugs[/bold green] - a fun way to learn about factors! Type 'help'.")
        render(ui, engine, None)

        while True:
            try:
                user_input = input_func(prompt_text)
            except (EOFError, KeyboardInterrupt):
                ui.console.print("👋 Bye!")
                return

            normalized_input = normalize_user_input(user_input)
            if not normalized_input:
                continue
            if normalized_input in EXIT_INPUTS:
                ui.console.print("👋 Bye!")
                return
            if normalized_input in {"help", "?"}:
                ui.show_help(HELP_LINES)
                continue

            try:
                response = run_command(engine, normalized_input)
            except UsageError as exc:
                ui.show_error(str(exc))
                continue
            except Exception:
                if DEBUG:
                    raise
                ui.show_error("???")
                continue

            render(ui, engine, response)


def main():
    """Main entry point for factorbugs CLI."""
    parser = argparse.ArgumentParser(description="Factor Bugs - learn factor pairs by building bugs")
    parser.add_argument("--mode", choices=[mode.value for mode in GameMode], help="Activity to start in")
    parser.add_argument("--number", type=int, help="Starting number (watch and guided)")
    parser.add_argument("--seed", type=int, help="Seed for repeatable creative-mode bugs")
    parser.add_argument("--tui", action="store_true", help="Open the full-screen Textual app")

    args = parser.parse_args()
    rng = random.Random(args.seed) if args.seed is not None else None
    # Creative mode always starts with a wild bug.
    number = None if args.mode == GameMode.CREATIVE.value else args.number

    if args.tui:
        from factorbugs.frontends.textual_app.app import main as tui_main

        tui_main(mode=args.mode, number=number, rng=rng)
        return

    prompt_loop(engine=FactorBugsEngine(mode=args.mode, number=number, rng=rng))


if __name__ == "__main__":
    main()
