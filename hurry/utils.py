"""Shared console helpers for hurry.

Rich-based reporting used by the command-line entry point.  Library code
never prints; it raises, and the CLI reports through these helpers.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(0.0042) -> "4.2ms"
        format_duration(3.7)    -> "3.7s"
    """
    if seconds < 0:
        return "0.0ms"
    if seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    return f"{seconds:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(rows: list[tuple[str, ...]], columns: list[str], title: str = "Summary") -> None:
    """Print a table with the given column headers and rows."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for i, column in enumerate(columns):
        table.add_column(column, style="dim" if i == 0 else None, no_wrap=i == 0)

    for row in rows:
        table.add_row(*(str(cell) for cell in row))

    console.print(table)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
