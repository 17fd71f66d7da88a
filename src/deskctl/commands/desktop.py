"""Standalone commands: import a desktop and lay it out."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from deskctl.commands._base import DeskCommand

if TYPE_CHECKING:
    from deskctl.commands._context import AppContext

_IMPORT_EXAMPLES = """\
  deskctl import desktop_info.txt
  deskctl import desktop_info.txt --icon-dir ./icons
  deskctl import items.json
  deskctl --json import export.dat --json-items"""


@click.command("import", cls=DeskCommand, examples=_IMPORT_EXAMPLES)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--icon-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory of extracted .png icons (default: the export's directory).",
)
@click.option(
    "--json-items",
    is_flag=True,
    help="Treat PATH as a JSON item list (implied by a .json suffix).",
)
@click.pass_obj
def import_cmd(app: AppContext, path: Path, icon_dir: Path | None, json_items: bool) -> None:
    """Replace the desktop with the items of an export file."""
    from deskctl.services.imports import ImportService

    service = ImportService(app.workspace)
    if json_items or path.suffix.lower() == ".json":
        app.emit(service.import_json(path))
    else:
        app.emit(service.import_file(path, icon_dir=icon_dir))


@click.command(cls=DeskCommand, examples="  deskctl items\n  deskctl -q items")
@click.pass_obj
def items(app: AppContext) -> None:
    """List desktop items and their positions."""
    from deskctl.services.layout import LayoutService

    app.emit(LayoutService(app.workspace).list_items())


@click.command(
    cls=DeskCommand,
    examples="""\
  deskctl organize
  deskctl organize --by-name""",
)
@click.option("--by-name", is_flag=True, help="Order items by name before laying them out.")
@click.pass_obj
def organize(app: AppContext, by_name: bool) -> None:
    """Lay every item onto the grid, column by column."""
    from deskctl.services.layout import LayoutService

    service = LayoutService(app.workspace)
    app.emit(service.sort_by_name() if by_name else service.organize())


@click.command(
    cls=DeskCommand,
    examples="""\
  deskctl shuffle
  deskctl shuffle --seed 42""",
)
@click.option("--seed", type=int, default=None, help="Random seed for a repeatable shuffle.")
@click.pass_obj
def shuffle(app: AppContext, seed: int | None) -> None:
    """Scatter items over random free cells."""
    from deskctl.services.layout import LayoutService

    app.emit(LayoutService(app.workspace).shuffle(seed=seed))


@click.command(
    cls=DeskCommand,
    examples="""\
  deskctl move a1b2c3d4 400 250
  deskctl move a1b2c3d4 0 0""",
)
@click.argument("item_id")
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.pass_obj
def move(app: AppContext, item_id: str, x: float, y: float) -> None:
    """Drop an item near (X, Y); it snaps to the nearest free cell."""
    from deskctl.services.layout import LayoutService

    app.emit(LayoutService(app.workspace).move(item_id, x, y))
