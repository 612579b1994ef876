from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


# stdout carries the MCP stream; diagnostics always go to stderr.
err_console = Console(stderr=True)


def configure_logging(level: str | int = "INFO") -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger("toolshed")
    root.setLevel(level)
    if any(isinstance(h, RichHandler) for h in root.handlers):
        return

    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    root.propagate = False
