"""Root CLI group: global output flags, settings resolution, subcommands."""

from __future__ import annotations

from typing import Any

import click

from deskctl import __version__
from deskctl.commands import register_commands
from deskctl.commands._base import DeskGroup
from deskctl.commands._context import AppContext
from deskctl.config.settings import DeskSettings

_ROOT_EXAMPLES = """\
  deskctl import desktop_info.txt
  deskctl rule add "File Type > pdf + Put in folder > Documents"
  deskctl rule preview
  deskctl rule apply
  deskctl history rollback
  deskctl --json items"""


@click.group(cls=DeskGroup, invoke_without_command=True, examples=_ROOT_EXAMPLES)
@click.version_option(version=__version__, prog_name="deskctl")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print ids only (or OK/ERROR).")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and timing spans.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("--no-plugins", is_flag=True, help="Skip plugin discovery for this run.")
@click.option(
    "-c", "--config", "config_path", default=None, help="Use this deskctl.toml instead of searching."
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    no_plugins: bool,
    config_path: str | None,
) -> None:
    """deskctl: organize desktop icons with "<subject> + <action>" rules.

    Import an exported desktop, add rules, preview them, apply them and
    roll back from history. State lives in .deskctl/ next to deskctl.toml
    (or in the current directory).
    """
    overrides: dict[str, Any] = {}
    if no_plugins:
        overrides["plugins"] = {"enabled": False}
    settings = DeskSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        **overrides,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
