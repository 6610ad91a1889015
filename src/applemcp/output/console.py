"""Rich consoles for the CLI listings.

Everything is rendered into an in-memory buffer and returned as a
string, so commands decide themselves where the text goes. Rich drops
the colour codes when the buffer is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

APPLE_THEME = Theme(
    {
        "apple.ok": "bold green",
        "apple.error": "bold red",
        "apple.tool": "bold cyan",
    }
)

DEFAULT_WIDTH = 120


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """A themed Console writing into a fresh StringIO."""
    return Console(
        file=StringIO(),
        theme=APPLE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Everything printed to *console* so far."""
    buffer = console.file
    assert isinstance(buffer, StringIO)
    return buffer.getvalue()
