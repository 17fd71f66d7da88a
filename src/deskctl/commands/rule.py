"""Command group: rule management, preview and apply."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from deskctl.commands._base import DeskGroup

if TYPE_CHECKING:
    from deskctl.commands._context import AppContext
    from deskctl.domain.models import Region

_RULE_EXAMPLES = """\
  deskctl rule add "All files + Sort by name"
  deskctl rule add 'File Type > image + Put in "Pictures" folder' --region 0,0,960,540
  deskctl rule preview
  deskctl rule apply
  deskctl rule save --name "Weekly cleanup\""""


def _parse_region(
    _ctx: click.Context, _param: click.Parameter, value: str | None
) -> Region | None:
    """Click callback: ``x,y,width,height`` -> Region."""
    if value is None:
        return None
    from deskctl.domain.models import Region

    parts = [p.strip() for p in value.split(",")]
    try:
        x, y, width, height = (float(p) for p in parts)
    except ValueError:
        raise click.BadParameter(f"expected x,y,width,height, got {value!r}") from None
    if width <= 0 or height <= 0:
        raise click.BadParameter("width and height must be positive")
    return Region(x=x, y=y, width=width, height=height)


_region_option = click.option(
    "--region",
    callback=_parse_region,
    default=None,
    metavar="X,Y,W,H",
    help="Limit the rules to items fully inside this rectangle.",
)


@click.group(cls=DeskGroup, examples=_RULE_EXAMPLES)
@click.pass_obj
def rule(app: AppContext) -> None:
    """Write, preview and apply "<subject> + <action>" rules."""


@rule.command(
    examples="""\
  deskctl rule add "All files + Sort by name"
  deskctl rule add 'Tags > Work + Put in "Work" folder'
  deskctl rule add "Time > Created time after 2024-01-01 + Zip"
  deskctl rule add "F-string: report* + Delete" --region 0,0,500,500"""
)
@click.argument("text")
@_region_option
@click.pass_obj
def add(app: AppContext, text: str, region: Region | None) -> None:
    """Append a rule to the active list."""
    from deskctl.services.rules import RuleService

    app.emit(RuleService(app.workspace).add(text, region=region))


@rule.command(examples="  deskctl rule remove rule-1a2b3c4d5e6f")
@click.argument("rule_id")
@click.pass_obj
def remove(app: AppContext, rule_id: str) -> None:
    """Remove one rule from the active list."""
    from deskctl.services.rules import RuleService

    app.emit(RuleService(app.workspace).remove(rule_id))


@rule.command("list", examples="  deskctl rule list\n  deskctl --json rule list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """Show the active rules."""
    from deskctl.services.rules import RuleService

    app.emit(RuleService(app.workspace).list())


@rule.command(examples="  deskctl rule clear")
@click.pass_obj
def clear(app: AppContext) -> None:
    """Remove every active rule."""
    from deskctl.services.rules import RuleService

    app.emit(RuleService(app.workspace).clear())


@rule.command(
    examples="""\
  deskctl rule parse "File Type > image + Sort by size"
  deskctl --json rule parse 'File Type > pdf + Zip in "Papers" folder'"""
)
@click.argument("text")
@click.pass_obj
def parse(app: AppContext, text: str) -> None:
    """Show how a rule is understood, without saving it."""
    from deskctl.services.rules import RuleService

    app.emit(RuleService(app.workspace).parse(text))


@rule.command(examples="  deskctl rule preview\n  deskctl rule preview --region 0,0,960,1080")
@_region_option
@click.pass_obj
def preview(app: AppContext, region: Region | None) -> None:
    """Run the active rules on a copy of the desktop."""
    from deskctl.services.rules import RuleService

    app.emit(RuleService(app.workspace).preview(region=region))


@rule.command(examples="  deskctl rule apply\n  deskctl rule apply --region 0,0,960,1080")
@_region_option
@click.pass_obj
def apply(app: AppContext, region: Region | None) -> None:
    """Run the active rules and commit the result (recorded in history)."""
    from deskctl.services.rules import RuleService

    app.emit(RuleService(app.workspace).apply(region=region))


@rule.command(
    examples="""\
  deskctl rule save
  deskctl rule save --name "Weekly cleanup" --region 0,0,960,1080"""
)
@click.option("--name", default=None, help="Set name (default: My Rule Set N).")
@_region_option
@click.pass_obj
def save(app: AppContext, name: str | None, region: Region | None) -> None:
    """Save the active rules as a named set."""
    from deskctl.services.rules import RuleService

    app.emit(RuleService(app.workspace).save_set(name, region=region))


@rule.command(examples="  deskctl rule load saved-1a2b3c4d5e6f")
@click.argument("saved_id")
@click.pass_obj
def load(app: AppContext, saved_id: str) -> None:
    """Append a saved set's rules to the active list."""
    from deskctl.services.rules import RuleService

    app.emit(RuleService(app.workspace).load_set(saved_id))


@rule.command(examples="  deskctl rule saved")
@click.pass_obj
def saved(app: AppContext) -> None:
    """List saved rule sets."""
    from deskctl.services.rules import RuleService

    app.emit(RuleService(app.workspace).list_sets())


@rule.command("delete-saved", examples="  deskctl rule delete-saved saved-1a2b3c4d5e6f")
@click.argument("saved_id")
@click.pass_obj
def delete_saved(app: AppContext, saved_id: str) -> None:
    """Delete a saved rule set."""
    from deskctl.services.rules import RuleService

    app.emit(RuleService(app.workspace).delete_set(saved_id))
