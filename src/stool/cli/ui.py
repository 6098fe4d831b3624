"""Shared UI components for the stool CLI."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

# Custom theme for stool
theme = Theme(
    {
        "info": "dim cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "tip": "blue",
        "heading": "bold cyan",
        "choice": "bold white",
    }
)

console = Console(theme=theme, highlight=False)
error_console = Console(theme=theme, stderr=True, highlight=False)


def print_heading(message: str) -> None:
    """Print a heading; ``message`` is plain text, never markup."""
    console.print(f"[heading]{escape(message)}[/heading]")


def print_info(message: str) -> None:
    console.print(f"[info]›[/info] {escape(message)}")


def print_warning(message: str) -> None:
    error_console.print(f"[warning]![/warning] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]✓[/bold green] {escape(message)}")


def print_menu(items: Sequence[str]) -> None:
    """Print a numbered menu, one entry per line, starting at 1."""
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("No.", style="choice", justify="right")
    table.add_column("Item")
    for index, item in enumerate(items, start=1):
        table.add_row(f"{index}.", Text(item))
    console.print(table)


def print_paths(title: str, paths: Sequence[str]) -> None:
    console.print()
    print_heading(title)
    for path in paths:
        console.print(f"  {path}", markup=False)


def print_error(title: str, message: str, tip: str | None = None) -> None:
    """Print a styled error message with an optional actionable tip."""
    content = Text()
    content.append(f"{message}\n", style="white")

    if tip:
        content.append("\nTip: ", style="bold blue")
        content.append(tip, style="blue")

    error_console.print(
        Panel(
            content,
            title=f"[bold red]Error: {escape(title)}[/bold red]",
            border_style="red",
            padding=(1, 1),
        )
    )
