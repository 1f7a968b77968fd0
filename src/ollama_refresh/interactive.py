"""Interactive checklist for choosing which stale models to update."""

from __future__ import annotations

from collections.abc import Callable

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from ollama_refresh.checklist import ALL_LABEL, Checklist

_HELP = (
    "Row number to toggle, [bold]j[/]/[bold]k[/] to move, "
    "[bold]t[/] to toggle the focused row, [bold]u[/] to update, [bold]q[/] to quit"
)


def build_checklist_table(checklist: Checklist) -> Table:
    """Render *checklist* as a Rich table, highlighting the focused row."""
    table = Table(title="Outdated models", show_header=False, box=None)
    table.add_column("Row", justify="right", style="dim")
    table.add_column("Box", no_wrap=True)
    table.add_column("Model")

    rows = [(ALL_LABEL, checklist.all_checked, False)]
    rows += [(item.label, item.checked, checklist.locked) for item in checklist.items]

    for row, (label, checked, disabled) in enumerate(rows):
        box = "[x]" if checked else "[ ]"
        style = "dim" if disabled else ""
        if row == checklist.cursor:
            style = f"{style} reverse".strip()
        table.add_row(str(row), Text(box), Text(label), style=style or None)
    return table


def run_interactive(
    stale: list[str],
    *,
    console: Console,
    ask: Callable[[], str] | None = None,
) -> list[str]:
    """Let the user pick models from *stale*; return the chosen names.

    Returns an empty list when the user quits without updating.
    """
    if not stale:
        console.print("[green]All models are up to date.[/green]")
        return []

    if ask is None:

        def ask() -> str:
            return Prompt.ask(">", console=console, default="")

    checklist = Checklist(stale)
    while True:
        console.print(build_checklist_table(checklist))
        console.print(_HELP, style="dim")
        try:
            answer = ask()
        except (EOFError, KeyboardInterrupt):
            console.print()
            return []
        command = answer.strip().lower()

        if command == "q":
            return []
        if command == "u":
            selected = checklist.selected()
            if not selected:
                console.print("[yellow]Nothing selected.[/yellow]")
                continue
            return selected
        if command == "j":
            checklist.move(1)
        elif command == "k":
            checklist.move(-1)
        elif command == "t":
            checklist.toggle_row(checklist.cursor)
        elif command.isdecimal() and int(command) < len(checklist):
            checklist.toggle_row(int(command))
        elif command:
            console.print(f"[red]Unknown choice {escape(answer)!r}[/red]")
