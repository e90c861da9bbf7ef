"""
Textual app for Factor Bugs - a full-screen terminal version of the game.
"""
# pyright: reportMissingImports=false

from collections.abc import Callable
import random
from typing import Any

from rich.console import Group
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import (
    Footer,
    Header,
    Input,
    Label,
    Static,
    TextArea,
)

from factorbugs.cli.main import EXIT_INPUTS, HELP_LINES, UsageError, normalize_user_input, run_command
from factorbugs.cli.rich_ui import build_bug_tree, build_facts_panel, mastery_prompt, render_score_bug
from factorbugs.core.config import FactorBugsConfig, get_config
from factorbugs.core.engine import FactorBugsEngine, RevealTimer
from factorbugs.core.types import GameMode, Response, ResponseType

MODE_TITLES = {
    GameMode.WATCH: "Watch & Learn",
    GameMode.GUIDED: "Guided Practice",
    GameMode.CREATIVE: "Creative Mode",
}


class _IdleTimer:
    """Placeholder handle used before the app is mounted."""

    def stop(self) -> None:
        pass


class FactorBugsTextualApp(App):
    """Textual app for Factor Bugs."""

    BINDINGS = [
        Binding("f1", "select_mode('watch')", "Watch"),
        Binding("f2", "select_mode('guided')", "Guided"),
        Binding("f3", "select_mode('creative')", "Creative"),
        Binding("ctrl+r", "check", "Check"),
    ]

    CSS = """
    .bug-container {
        height: 100%;
        border: solid $primary;
        padding: 1;
    }

    #bug {
        height: auto;
    }

    #history {
        height: 12;
        border: none;
        margin: 0;
        padding: 0;
    }

    .input-container {
        height: 3;
        dock: bottom;
        background: $surface;
        padding: 0 1;
    }

    Input {
        width: 100%;
    }

    .stats-panel {
        width: 34;
        height: 100%;
        border: solid $primary;
        padding: 1;
    }

    .title {
        text-align: center;
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }

    .stat-item {
        margin-bottom: 1;
    }
    """

    TITLE = "Factor Bugs 🐛"
    SUB_TITLE = " – A fun way to learn about factors!"

    def __init__(
        self,
        engine: FactorBugsEngine | None = None,
        config: FactorBugsConfig | None = None,
        **engine_kwargs: Any,
    ):
        super().__init__()
        self.game_config = config or get_config()
        self._timers_ready = False
        self.engine = engine or FactorBugsEngine(self.game_config, scheduler=self._schedule_reveal, **engine_kwargs)

    def _schedule_reveal(self, callback: Callable[[], None]) -> RevealTimer:
        """Run the engine's reveal callback on a Textual interval timer."""
        if not self._timers_ready:
            return _IdleTimer()

        def _tick() -> None:
            callback()
            self._refresh_view()

        return self.set_interval(self.game_config.reveal_interval, _tick)

    def compose(self) -> ComposeResult:
        """Create child widgets."""
        yield Header()

        with Horizontal():
            with Vertical(classes="bug-container"):
                yield Label("Factor Bugs", id="mode-title", classes="title")
                with VerticalScroll():
                    yield Static("", id="bug")
                yield TextArea(
                    "",
                    id="history",
                    read_only=True,
                    show_line_numbers=False,
                    soft_wrap=True,
                )

            with Vertical(classes="stats-panel"):
                yield Label("Progress", classes="title")
                yield Label("", id="score-bug", classes="stat-item")
                yield Label("", id="completed", classes="stat-item")
                yield Label("", id="message", classes="stat-item")

        with Horizontal(classes="input-container"):
            yield Input(placeholder="Type a command, or 'help'...", id="input")

        yield Footer()

    def on_mount(self) -> None:
        """Initialize when app starts."""
        self._timers_ready = True
        if self.engine.mode is GameMode.WATCH:
            # Restart the reveal now that timers can run.
            self.engine.select_number(self.engine.session.number)
        self.query_one("#input", Input).focus()
        self._refresh_view()

    def on_unmount(self) -> None:
        self.engine.close()

    def _refresh_view(self) -> None:
        """Redraw the bug and the stats panel from the engine snapshot."""
        snapshot = self.engine.snapshot()
        mode = self.engine.mode

        self.query_one("#mode-title", Label).update(MODE_TITLES[mode])

        bug = build_bug_tree(snapshot)
        if mode is GameMode.WATCH and snapshot["facts"]:
            self.query_one("#bug", Static).update(Group(bug, build_facts_panel(snapshot["facts"])))
        else:
            self.query_one("#bug", Static).update(bug)

        if mode.is_scored:
            progress = snapshot["progress"]
            self.query_one("#score-bug", Label).update(render_score_bug(progress))
            completed = ", ".join(map(str, progress["completed_numbers"])) or "none yet"
            self.query_one("#completed", Label).update(f"Solved: {completed}")
        else:
            self.query_one("#score-bug", Label).update("Watch the bug grow!")
            self.query_one("#completed", Label).update("")

        message = snapshot.get("message") or ""
        if snapshot.get("mastery_pending"):
            suggested_mode = GameMode.CREATIVE.value if mode is GameMode.GUIDED else None
            message = f"{message}\n\n{mastery_prompt(suggested_mode)}".strip()
        self.query_one("#message", Label).update(message)

    def _format_history_response(self, response: Response) -> str:
        """Render a plain-text transcript line for the history view."""
        content = response.content if isinstance(response.content, dict) else {}

        if response.type == ResponseType.ERROR:
            return f"Oops: {response.content}"
        if response.type == ResponseType.MASTERY:
            return f"{content.get('title', '')} {content.get('message', '')}".strip()
        if response.type == ResponseType.CHECK:
            return content.get("message") or "Checked."
        if response.type == ResponseType.MODE:
            return f"{MODE_TITLES[GameMode(content['mode'])]}: bug for {content.get('number')}"
        if response.type == ResponseType.BUG:
            return f"New bug for {content.get('number')}"
        if response.type == ResponseType.BUILD:
            shape = content.get("answers") or {}
            stinger = "with" if shape.get("stinger") is not None else "without"
            return f"Bug now has {len(shape.get('legs', []))} leg pair(s), {stinger} a stinger"
        return ""

    def _handle_response(self, input_text: str, response: Response | None) -> None:
        responses = [response] if response is not None else []
        pending = self.engine.get_pending_response()
        if pending is not None:
            responses.append(pending)

        history = self.query_one("#history", TextArea)
        for index, current in enumerate(responses):
            display_input = input_text if index == 0 else "..."
            response_text = self._format_history_response(current)
            if response_text:
                history.insert(f"> {display_input}\n{response_text}\n\n", history.document.end)
        history.scroll_end(animate=False)

        self._refresh_view()

    @on(Input.Submitted)
    async def handle_input(self, event: Input.Submitted) -> None:
        """Handle user input submission."""
        input_text = event.value.strip()
        normalized_input = normalize_user_input(input_text)
        event.input.value = ""

        if normalized_input in EXIT_INPUTS:
            self.engine.close()
            self.exit()
            return
        if not normalized_input:
            self._refresh_view()
            return
        if normalized_input in {"help", "?"}:
            history = self.query_one("#history", TextArea)
            lines = "\n".join(f"{usage}: {description}" for usage, description in HELP_LINES)
            history.insert(f"> {input_text}\n{lines}\n\n", history.document.end)
            history.scroll_end(animate=False)
            return

        try:
            response = run_command(self.engine, normalized_input)
        except UsageError as exc:
            response = Response(type=ResponseType.ERROR, content=str(exc))
        self._handle_response(input_text, response)

    def action_select_mode(self, mode: str) -> None:
        self._handle_response(f"mode {mode}", self.engine.select_mode(mode))

    def action_check(self) -> None:
        self._handle_response("check", self.engine.check_answers())


def main(
    *,
    mode: str | None = None,
    number: int | None = None,
    rng: random.Random | None = None,
):
    """Run the Textual app."""
    app = FactorBugsTextualApp(mode=mode, number=number, rng=rng)
    app.run()


if __name__ == "__main__":
    main()
