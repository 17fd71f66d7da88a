"""Subcommand modules for deskctl.

:func:`register_commands` imports lazily so ``deskctl --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register command groups and standalone commands on the root group."""
    # --- Groups ---
    from deskctl.commands.history import history
    from deskctl.commands.rule import rule
    from deskctl.commands.tag import tag

    cli.add_command(rule)
    cli.add_command(history)
    cli.add_command(tag)

    # --- Standalone commands ---
    from deskctl.commands.desktop import import_cmd, items, move, organize, shuffle

    cli.add_command(import_cmd)
    cli.add_command(items)
    cli.add_command(organize)
    cli.add_command(shuffle)
    cli.add_command(move)
