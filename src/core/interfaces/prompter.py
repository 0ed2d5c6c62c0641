"""Contract of the terminal renderer used by the prompt engine."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Prompter(Protocol):
    """Asks one question at a time; the engine owns ordering and validation."""

    def confirm(self, message: str) -> bool: ...

    def text(self, message: str) -> str: ...

    def error(self, message: str) -> None:
        """Show a validation error before the question is asked again."""
        ...
