from __future__ import annotations

from rich.console import Console

console = Console(soft_wrap=True, highlight=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False)


def info(message: str) -> None:
    # Service messages are printed verbatim: no markup, no :emoji: codes.
    console.print(message, markup=False, emoji=False)


def error(message: str) -> None:
    err_console.print(message, style="red", markup=False, emoji=False)
