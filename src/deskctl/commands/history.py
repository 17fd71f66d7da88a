"""Command group: desktop history snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from deskctl.commands._base import DeskGroup

if TYPE_CHECKING:
    from deskctl.commands._context import AppContext

_HISTORY_EXAMPLES = """\
  deskctl history list
  deskctl history rollback
  deskctl history rollback h-0a1b2c3d4e5f
  deskctl history star h-0a1b2c3d4e5f"""


@click.group(cls=DeskGroup, examples=_HISTORY_EXAMPLES)
@click.pass_obj
def history(app: AppContext) -> None:
    """Inspect, star and roll back desktop snapshots."""


@history.command("list", examples="  deskctl history list\n  deskctl -q history list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List snapshots, most recent first."""
    from deskctl.services.history import HistoryService

    app.emit(HistoryService(app.workspace).list())


@history.command(
    examples="""\
  deskctl history rollback
  deskctl history rollback h-0a1b2c3d4e5f"""
)
@click.argument("entry_id", required=False, default=None)
@click.pass_obj
def rollback(app: AppContext, entry_id: str | None) -> None:
    """Restore the desktop from ENTRY_ID, or from the most recent snapshot."""
    from deskctl.services.history import HistoryService

    app.emit(HistoryService(app.workspace).rollback(entry_id))


@history.command(examples="  deskctl history star h-0a1b2c3d4e5f")
@click.argument("entry_id")
@click.pass_obj
def star(app: AppContext, entry_id: str) -> None:
    """Toggle the star on a snapshot."""
    from deskctl.services.history import HistoryService

    app.emit(HistoryService(app.workspace).toggle_star(entry_id))


@history.command(examples="  deskctl history delete h-0a1b2c3d4e5f")
@click.argument("entry_id")
@click.pass_obj
def delete(app: AppContext, entry_id: str) -> None:
    """Delete a snapshot."""
    from deskctl.services.history import HistoryService

    app.emit(HistoryService(app.workspace).delete(entry_id))
