# mcdelta/cli/ui.py
"""
Shared UI helpers for CLI commands.

Usage:
    from mcdelta.cli.ui import ui, console

    ui.header("Compare")
    ui.success("Done!")

    with handle_errors():
        ...  # McDeltaError -> red message, exit code 1
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Sequence

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from mcdelta.exceptions import McDeltaError
from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import CLI

logger = get_logger(__name__)

console = Console()


class UI:
    """Consistent styling for every command. Messages are markup-escaped."""

    def print(self, msg: str, style: str = "") -> None:
        if style:
            console.print(f"[{style}]{escape(msg)}[/{style}]")
        else:
            console.print(escape(msg))

    def header(self, title: str, subtitle: str = "") -> None:
        content = f"[bold]{escape(title)}[/bold]"
        if subtitle:
            content += f"\n[dim]{escape(subtitle)}[/dim]"
        console.print(Panel.fit(content, border_style="blue"))

    def section(self, title: str) -> None:
        console.print(f"\n[bold cyan]{escape(title)}[/bold cyan]")

    def success(self, msg: str) -> None:
        console.print(f"[green]✓[/green] {escape(msg)}")

    def error(self, msg: str) -> None:
        console.print(f"[red]✗ {escape(msg)}[/red]")

    def warning(self, msg: str) -> None:
        console.print(f"[yellow]⚠[/yellow] {escape(msg)}")

    def info(self, msg: str) -> None:
        console.print(f"[dim]{escape(msg)}[/dim]")

    def table(self, columns: Sequence[str], rows: Sequence[Sequence[object]], title: str = "") -> None:
        """Print a simple table; the first column is highlighted."""
        table = Table(show_header=True, header_style="bold", title=title or None)
        for i, name in enumerate(columns):
            table.add_column(name, style="cyan" if i == 0 else None, overflow="fold")
        for row in rows:
            table.add_row(*(escape(str(cell)) for cell in row))
        console.print(table)


ui = UI()


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn McDeltaError into a red message and exit code 1."""
    try:
        yield
    except McDeltaError as e:
        logger.debug(f"{CLI} Command failed: {e}", exc_info=True)
        ui.error(str(e))
        raise typer.Exit(code=1)


__all__ = ["ui", "console", "UI", "handle_errors"]
