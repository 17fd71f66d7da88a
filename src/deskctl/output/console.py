"""Rich console and theme used by the human-readable renderers.

Renderers draw into an in-memory console and return plain strings, so
``format_result`` stays a pure function. Rich drops colour codes on its
own when the buffer is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

# Colour per desktop item type; "file" is left unstyled.
ITEM_TYPE_COLORS: dict[str, str] = {
    "app": "cyan",
    "folder": "yellow",
    "file": "",
    "image": "green",
    "settings": "blue",
}

DESK_THEME = Theme(
    {
        "desk.ok": "bold green",
        "desk.error": "bold red",
        "desk.warning": "bold yellow",
        "desk.op": "bold cyan",
        "desk.key": "dim",
        "desk.id": "bold blue",
        "desk.label": "bold",
        "desk.pos": "magenta",
        "desk.star": "bold yellow",
        **{f"desk.type.{name}": color for name, color in ITEM_TYPE_COLORS.items()},
    }
)

DEFAULT_WIDTH = 120


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    return Console(
        file=StringIO(),
        theme=DESK_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Text written so far to a console made by :func:`create_console`."""
    buffer = console.file
    assert isinstance(buffer, StringIO)
    return buffer.getvalue()


def style_for_type(item_type: str) -> str:
    return f"desk.type.{item_type}" if item_type in ITEM_TYPE_COLORS else ""
