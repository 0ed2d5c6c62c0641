"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- The same progress/summary helpers serve `pipelines:setup` and `doctor`.
"""

from __future__ import annotations

from typing import Awaitable, TypeVar

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.services.pipeline_setup import SetupResult

T = TypeVar("T")


async def run_action(console: Console, label: str, awaitable: Awaitable[T]) -> T:
    """Print `<label>... done`, or `<label>... !` and re-raise on failure."""

    console.print(f"{label}...", end=" ")
    try:
        result = await awaitable
    except BaseException:
        console.print("[bold red]![/bold red]")
        raise
    console.print("[green]done[/green]")
    return result


def build_summary_panel(result: SetupResult) -> Panel:
    """Panel summarizing what a setup run created."""

    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", no_wrap=True)
    table.add_column(style="white")
    table.add_row("Pipeline", f"{result.pipeline.name} ({result.pipeline.id})")
    table.add_row("Repository", f"{result.repository.full_name or '-'} @ {result.repository.default_branch}")
    table.add_row("Production", result.production_app.name)
    table.add_row("Staging", result.staging_app.name)
    table.add_row("CI", "enabled" if result.ci_settings and result.ci_settings.ci else "disabled")

    title = Text("Pipeline ready", style="bold green")
    return Panel(table, title=title, border_style="green")


def print_error(console: Console, message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}", highlight=False)
