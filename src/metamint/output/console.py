"""Rich Console factory and theme for metamint output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MINT_THEME = Theme(
    {
        "mint.ok": "bold green",
        "mint.error": "bold red",
        "mint.warning": "bold yellow",
        "mint.op": "bold cyan",
        "mint.key": "dim",
        "mint.address": "bold blue",
        "mint.status.Draft": "yellow",
        "mint.status.Published": "green",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=MINT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str | None) -> str:
    """Return the Rich style name for a policy status value."""
    if status in ("Draft", "Published"):
        return f"mint.status.{status}"
    return ""
