"""Rich Console factory and theme for roperty output.

Consoles render into a StringIO buffer so renderers keep a
``-> str`` contract. Outside a terminal (tests, pipes) Rich drops the
color codes by itself.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

ROPERTY_THEME = Theme(
    {
        "rp.ok": "bold green",
        "rp.error": "bold red",
        "rp.warning": "bold yellow",
        "rp.op": "bold cyan",
        "rp.key": "dim",
        "rp.name": "bold blue",
        "rp.value": "bold",
        "rp.wildcard": "magenta",
        "rp.unaddressed": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=ROPERTY_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Rendered text of a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
