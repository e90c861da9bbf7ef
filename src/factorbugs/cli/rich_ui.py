"""
Rich rendering for Factor Bugs snapshots, shared by the CLI and the Textual app.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

CREATURE_EMOJIS = {"Bug": "🐛", "Bee": "🐝", "Slug": "🐌"}
CREATURE_COLORS = {"Bug": "green", "Bee": "yellow", "Slug": "green"}
MARK_STYLES = {"correct": "bold green", "incorrect": "bold red", "unknown": "white"}
SCORE_PARTS = 10


def _slot_text(raw_value: str, mark: str | None, revealed: bool) -> str:
    shown = escape(raw_value) if raw_value else "__"
    style = MARK_STYLES.get(mark or "unknown", "white") if revealed else "white"
    return f"[{style}]{shown}[/{style}]"


def _add_revealed_parts(tree: Tree, snapshot: dict[str, Any]) -> None:
    structure = snapshot["structure"]
    step = snapshot.get("reveal_step", 0)
    pairs = structure["pairs"]

    shown_pairs = pairs[:step]
    if shown_pairs:
        tree.add(f"Antennae: {shown_pairs[0][0]} × {shown_pairs[0][1]}")
    if len(shown_pairs) > 1:
        legs = tree.add("Legs")
        for a, b in shown_pairs[1:]:
            legs.add(f"{a} × {b}")
    # The stinger is the last part revealed.
    if structure["stinger"] is not None and step > len(pairs):
        tree.add(f"Stinger: {structure['stinger']} × {structure['stinger']}")
    if step < snapshot.get("reveal_total", 0):
        tree.add("[dim]...[/dim]")


def _add_answer_parts(tree: Tree, snapshot: dict[str, Any]) -> None:
    answers = snapshot.get("answers") or {}
    correctness = snapshot.get("correctness") or {}
    revealed = bool(snapshot.get("revealed"))
    structure = snapshot["structure"]

    antenna_marks = correctness.get("antennae") or [None, None]
    if structure["pairs"] or snapshot["mode"] == "creative":
        first, second = answers.get("antennae", ["", ""])
        tree.add(
            "Antennae: "
            f"{_slot_text(first, antenna_marks[0], revealed)} × {_slot_text(second, antenna_marks[1], revealed)}"
        )

    legs = answers.get("legs", [])
    if legs:
        leg_branch = tree.add("Legs")
        leg_marks = correctness.get("legs", [])
        for index, (first, second) in enumerate(legs):
            marks = leg_marks[index] if index < len(leg_marks) else [None, None]
            leg_branch.add(
                f"[dim]{index}:[/dim] {_slot_text(first, marks[0], revealed)} × {_slot_text(second, marks[1], revealed)}"
            )

    if answers.get("stinger") is not None:
        tree.add(f"Stinger: {_slot_text(answers['stinger'], correctness.get('stinger'), revealed)}")


def build_bug_tree(snapshot: dict[str, Any]) -> Tree:
    """Draw the current bug as a tree of body parts."""
    structure = snapshot.get("structure")
    if not structure:
        return Tree("[dim]No bug selected yet.[/dim]")

    mode = snapshot["mode"]
    creature = structure["creature"]
    emoji = CREATURE_EMOJIS.get(creature, "🐛")
    color = CREATURE_COLORS.get(creature, "green")
    if mode == "creative":
        # The learner has to work out which creature it is.
        label = f"{emoji} A wild factor bug for [bold]{structure['number']}[/bold] appeared!"
    else:
        label = f"{emoji} [bold {color}]Factor {creature}[/bold {color}] for [bold]{structure['number']}[/bold]"
    tree = Tree(label)

    if mode == "watch":
        _add_revealed_parts(tree, snapshot)
    else:
        _add_answer_parts(tree, snapshot)
    return tree


def build_facts_panel(facts: dict[str, Any]) -> Group:
    """Explain how the factors were found (Watch mode)."""
    table = Table(title=f"Finding the factors of {facts['number']}", show_header=False)
    for a, b in facts["equations"]:
        table.add_row(f"{a} × {b}", "=", str(facts["number"]))

    body = f"[bold]{facts['title']}[/bold]\n{facts['explanation']}"
    if facts["factors"]:
        listed = ", ".join(map(str, facts["factors"]))
        body += f"\n\nSo the factors of {facts['number']} are: [bold green]{listed}[/bold green]."
    if facts["prime_factorization"]:
        body += f"\nPrime factors: {facts['prime_factorization']}"

    return Group(table, Panel(body, border_style="green"))


def render_score_bug(progress: dict[str, Any]) -> str:
    """One body part lights up per solved bug."""
    score = progress.get("score", 0)
    parts = "".join("●" if score > index else "○" for index in range(SCORE_PARTS))
    return (
        f"[green]{parts}[/green]  Score: [bold green]{score}[/bold green]  "
        f"Errors: [bold red]{progress.get('errors', 0)}[/bold red]"
    )


def mastery_prompt(suggested_mode: str | None) -> str:
    if suggested_mode:
        return "Type 'yes' to go to Creative Mode or 'no' to keep practising."
    return "Type 'yes' to play again."


class RichUI:
    """Prints engine snapshots to a rich console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(emoji=True, highlight=False, markup=True)

    def show_bug(self, snapshot: dict[str, Any]) -> None:
        self.console.print(build_bug_tree(snapshot))
        if snapshot.get("message"):
            self.console.print(f"[bold]{snapshot['message']}[/bold]")

    def show_facts(self, facts: dict[str, Any] | None) -> None:
        if facts:
            self.console.print(build_facts_panel(facts))

    def show_progress(self, progress: dict[str, Any]) -> None:
        self.console.print(render_score_bug(progress))

    def show_mastery(self, title: str, message: str, suggested_mode: str | None) -> None:
        self.console.print(
            Panel(
                f"{message}\n\n{mastery_prompt(suggested_mode)}",
                title=f"🏆 {title}",
                border_style="bold yellow",
                expand=False,
            )
        )

    def show_error(self, message: str) -> None:
        self.console.print(f"[bold red]Oops:[/bold red] {escape(message)}")

    def show_help(self, commands: list[tuple[str, str]]) -> None:
        table = Table(title="Commands", show_header=False)
        for usage, description in commands:
            table.add_row(f"[cyan]{usage}[/cyan]", description)
        self.console.print(table)


def create_rich_ui(console: Console | None = None) -> RichUI:
    return RichUI(console)
