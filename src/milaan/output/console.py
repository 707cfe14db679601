"""Themed Rich consoles that draw into memory.

Renderers print to a console from :func:`create_console` and hand back
the captured text, so every output mode ends up as a plain ``str``.
Rich leaves out ANSI codes when it is not writing to a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

DEFAULT_WIDTH = 120

MILAAN_THEME = Theme(
    {
        "milaan.ok": "bold green",
        "milaan.error": "bold red",
        "milaan.warning": "bold yellow",
        "milaan.op": "bold cyan",
        "milaan.key": "dim",
        "milaan.id": "bold blue",
        "milaan.title": "bold",
        "milaan.urgent": "bold red",
        "milaan.status.open": "green",
        "milaan.status.in-progress": "yellow",
        "milaan.status.solved": "blue",
        "milaan.role.helper": "magenta",
        "milaan.role.asker": "cyan",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """A milaan-themed console writing to an in-memory buffer."""
    buffer = StringIO()
    return Console(
        file=buffer,
        theme=MILAAN_THEME,
        width=width if width is not None else DEFAULT_WIDTH,
        no_color=no_color,
        highlight=False,
    )


def get_output(console: Console) -> str:
    """Everything printed so far to a console from :func:`create_console`."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        raise TypeError("console does not write to an in-memory buffer")
    return buffer.getvalue()


def _themed(prefix: str, value: str) -> str:
    name = f"milaan.{prefix}.{value}"
    return name if name in MILAAN_THEME.styles else ""


def style_for_status(status: str) -> str:
    """Theme style for a problem status; ``""`` for an unknown status."""
    return _themed("status", status)


def style_for_role(role: str) -> str:
    return _themed("role", role)
