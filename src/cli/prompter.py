"""Terminal renderer for the question engine (typer prompts)."""

from __future__ import annotations

import typer
from rich.console import Console

from core.interfaces.prompter import Prompter


class TyperPrompter(Prompter):
    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)

    def confirm(self, message: str) -> bool:
        return typer.confirm(f"? {message}", default=True)

    def text(self, message: str) -> str:
        return typer.prompt(f"? {message}")

    def error(self, message: str) -> None:
        self._console.print(f"[red]>>[/red] {message}")
