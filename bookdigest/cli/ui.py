# bookdigest/cli/ui.py
"""
Console output for the bookdigest CLI.

Usage:
    from bookdigest.cli.ui import ui

    ui.header("bookdigest", "Progressive chapter summaries")
    stop_at = ui.choose_stop_target(document.toc)
    ui.chapter_summary(record.title, record.summary)
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.prompt import IntPrompt
from rich.table import Table

console = Console()

ALL_CHAPTERS = "All chapters"


# =============================================================================
# UI Helper Class
# =============================================================================


class UI:
    """Status lines, book listings, summaries and the stop-target prompt."""

    # -------------------------------------------------------------------------
    # Status lines
    # -------------------------------------------------------------------------

    def header(self, title: str, subtitle: str = "") -> None:
        content = f"[bold]{title}[/bold]"
        if subtitle:
            content += f"\n[dim]{subtitle}[/dim]"
        console.print(Panel.fit(content, border_style="blue"))

    def section(self, title: str) -> None:
        console.print(f"\n[bold cyan]{title}[/bold cyan]")

    def success(self, msg: str) -> None:
        console.print(f"[green]✓[/green] {msg}")

    def error(self, msg: str) -> None:
        console.print(f"[red]✗[/red] {msg}")

    def warning(self, msg: str, detail: str = "") -> None:
        suffix = f" [dim]({detail})[/dim]" if detail else ""
        console.print(f"[yellow]⚠[/yellow] {msg}{suffix}")

    def info(self, msg: str) -> None:
        console.print(f"[dim]{msg}[/dim]")

    # -------------------------------------------------------------------------
    # Book listings
    # -------------------------------------------------------------------------

    def toc(self, entries: Sequence[str]) -> None:
        """Numbered table of contents, in reading order."""
        for i, entry in enumerate(entries, 1):
            console.print(f"  [cyan]{i:>3}.[/cyan] {entry}")

    def chapter_table(self, rows: Sequence[tuple[int, str, int]]) -> None:
        """One row per chapter: (number, opening line, character count)."""
        table = Table()
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Opening line")
        table.add_column("Characters", justify="right")
        for number, opening, chars in rows:
            table.add_row(str(number), opening, f"{chars:,}")
        console.print(table)

    def settings_table(self, settings: Sequence[tuple[str, str]]) -> None:
        table = Table(show_header=False)
        table.add_column("Setting", style="bold")
        table.add_column("Value")
        for name, value in settings:
            table.add_row(name, value)
        console.print(table)

    def chapter_summary(self, title: str, summary: str) -> None:
        console.print()
        console.rule(f"[bold]{title}[/bold]")
        console.print(Markdown(summary))

    # -------------------------------------------------------------------------
    # Prompts
    # -------------------------------------------------------------------------

    def choose_stop_target(self, toc: Sequence[str]) -> Optional[str]:
        """
        Ask which chapter to stop after.

        The TOC is listed in reading order with "All chapters" last; Enter
        picks "All chapters".

        Returns:
            The chosen TOC label, or None to summarize the whole book
        """
        choices = list(toc) + [ALL_CHAPTERS]
        default = len(choices)

        console.print("\n  [bold]Stop after chapter:[/bold]")
        for i, choice in enumerate(choices, 1):
            marker = " [dim](default)[/dim]" if i == default else ""
            console.print(f"    [cyan][{i}][/cyan] {choice}{marker}")

        while True:
            idx = IntPrompt.ask("  Choice", default=default, console=console)
            if 1 <= idx <= len(choices):
                break
            console.print(f"  [red]Please enter 1-{len(choices)}[/red]")

        selected = choices[idx - 1]
        console.print(f"  [dim]→ {selected}[/dim]")
        return None if selected == ALL_CHAPTERS else selected

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    def progress(self, description: str = "Working...", total: float = 1.0) -> "_RichProgress":
        """
        Progress bar driven by absolute values.

        Usage:
            with ui.progress("Summarizing", total=1.0) as update:
                update(engine.get_progress(), description="Chapter 3/12")
        """
        return _RichProgress(description, total)


class _RichProgress:
    def __init__(self, description: str, total: float):
        self.description = description
        self.total = total
        self.progress: Optional[Progress] = None
        self.task = None

    def __enter__(self) -> Callable[..., None]:
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=console,
        )
        self.progress.__enter__()
        self.task = self.progress.add_task(self.description, total=self.total)
        return self._update

    def _update(self, completed: float, description: Optional[str] = None) -> None:
        fields = {"description": description} if description else {}
        self.progress.update(self.task, completed=completed, **fields)

    def __exit__(self, *args) -> None:
        self.progress.__exit__(*args)


# =============================================================================
# Singleton Instance
# =============================================================================

ui = UI()

__all__ = ["ALL_CHAPTERS", "UI", "console", "ui"]
