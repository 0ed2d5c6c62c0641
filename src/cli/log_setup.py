"""Logging setup: stdlib `logging` rendered by Rich on stderr."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_CONFIGURED = False


def configure_logging(level: str = "WARNING") -> None:
    """Install a single RichHandler on the root logger (idempotent)."""

    global _CONFIGURED
    resolved = getattr(logging, level.upper(), logging.WARNING)
    if _CONFIGURED:
        logging.getLogger().setLevel(resolved)
        return

    logging.basicConfig(
        level=resolved,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(max(resolved, logging.WARNING))
    _CONFIGURED = True
