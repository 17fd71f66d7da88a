"""AppContext: the object every subcommand receives via ``@click.pass_obj``.

It is built once by the root group from the resolved settings. Building
it configures logging (and span collection under ``--verbose``); the
workspace itself is opened on first use only.
"""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING

import click

from deskctl.config.logging import configure_logging
from deskctl.output.formatters import format_result
from deskctl.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from deskctl.config.settings import DeskSettings
    from deskctl.infrastructure.workspace import Workspace
    from deskctl.services.result import ServiceResult


class AppContext:
    def __init__(self, settings: DeskSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @cached_property
    def workspace(self) -> Workspace:
        """Opened lazily so ``--help`` and ``rule parse`` never read the session."""
        from deskctl.infrastructure.workspace import Workspace

        return Workspace(self.settings)

    def render(self, result: ServiceResult) -> str:
        return format_result(
            result,
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; a failed result ends the command with exit code 1.

        Results go to stdout, failures to stderr. Warnings are echoed to
        stderr as ``WARNING:`` lines except in JSON mode, where the
        payload already carries them.
        """
        output = self.render(result)
        if not result.ok:
            click.echo(output, err=True)
            raise SystemExit(1)

        click.echo(output)
        if not self.settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
