"""Click base classes shared by every deskctl command.

Commands and groups take an ``examples=`` string. It stays out of
``--help`` (which only mentions it in the epilog) and is printed by an
eager ``--examples`` flag instead.

``DeskGroup`` also converts an unreadable session file into a
``ClickException``, so the user sees one error line and exit code 1.
"""

from __future__ import annotations

from typing import Any

import click

from deskctl.infrastructure.store import SessionLoadError

_EXAMPLES_EPILOG = "Run with --examples for usage examples."


class _ExamplesMixin:
    """Adds the ``--examples`` flag when the command has examples."""

    params: list[click.Parameter]
    epilog: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return
        self.epilog = self.epilog or _EXAMPLES_EPILOG
        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=self._show_examples,
                help="Show usage examples and exit.",
            )
        )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
            ctx.exit(0)


class DeskCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class DeskGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`DeskCommand`."""

    command_class = DeskCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except SessionLoadError as exc:
            raise click.ClickException(str(exc)) from exc
