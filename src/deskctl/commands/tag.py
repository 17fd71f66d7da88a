"""Command group: tags."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from deskctl.commands._base import DeskGroup

if TYPE_CHECKING:
    from deskctl.commands._context import AppContext

_TAG_EXAMPLES = """\
  deskctl tag create --name Work --color "#3b82f6"
  deskctl tag add Work report.docx
  deskctl tag suggest --assign
  deskctl rule add 'Tags > Work + Put in "Work" folder'"""


@click.group(cls=DeskGroup, examples=_TAG_EXAMPLES)
@click.pass_obj
def tag(app: AppContext) -> None:
    """Group desktop items under named, colored tags.

    TAG arguments accept a tag id or a tag name.
    """


@tag.command("list", examples="  deskctl tag list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List tags and their items."""
    from deskctl.services.tags import TagService

    app.emit(TagService(app.workspace).list())


@tag.command(
    examples="""\
  deskctl tag create
  deskctl tag create --name Work --color "#3b82f6\""""
)
@click.option("--name", default=None, help="Tag name (default: NewTag, NewTag1, ...).")
@click.option("--color", default=None, help="Hex color such as #ff8800.")
@click.pass_obj
def create(app: AppContext, name: str | None, color: str | None) -> None:
    """Create a tag."""
    from deskctl.services.tags import TagService

    app.emit(TagService(app.workspace).create(name, color=color))


@tag.command(examples="  deskctl tag rename NewTag Work")
@click.argument("tag_ref", metavar="TAG")
@click.argument("new_name")
@click.pass_obj
def rename(app: AppContext, tag_ref: str, new_name: str) -> None:
    """Rename a tag."""
    from deskctl.services.tags import TagService

    app.emit(TagService(app.workspace).rename(tag_ref, new_name))


@tag.command(examples='  deskctl tag color Work "#22c55e"')
@click.argument("tag_ref", metavar="TAG")
@click.argument("color")
@click.pass_obj
def color(app: AppContext, tag_ref: str, color: str) -> None:
    """Change a tag's color."""
    from deskctl.services.tags import TagService

    app.emit(TagService(app.workspace).recolor(tag_ref, color))


@tag.command(examples="  deskctl tag toggle Work")
@click.argument("tag_ref", metavar="TAG")
@click.pass_obj
def toggle(app: AppContext, tag_ref: str) -> None:
    """Expand or collapse a tag in listings."""
    from deskctl.services.tags import TagService

    app.emit(TagService(app.workspace).toggle_expand(tag_ref))


@tag.command(examples="  deskctl tag add Work report.docx")
@click.argument("tag_ref", metavar="TAG")
@click.argument("label")
@click.pass_obj
def add(app: AppContext, tag_ref: str, label: str) -> None:
    """Add an item label to a tag."""
    from deskctl.services.tags import TagService

    app.emit(TagService(app.workspace).add_item(tag_ref, label))


@tag.command(examples="  deskctl tag remove Work report.docx")
@click.argument("tag_ref", metavar="TAG")
@click.argument("label")
@click.pass_obj
def remove(app: AppContext, tag_ref: str, label: str) -> None:
    """Remove an item label from a tag."""
    from deskctl.services.tags import TagService

    app.emit(TagService(app.workspace).remove_item(tag_ref, label))


@tag.command(
    examples="""\
  deskctl tag delete Work
  deskctl tag delete --all"""
)
@click.argument("tag_ref", metavar="[TAG]", required=False, default=None)
@click.option("--all", "delete_all", is_flag=True, help="Delete every tag.")
@click.pass_obj
def delete(app: AppContext, tag_ref: str | None, delete_all: bool) -> None:
    """Delete a tag, or all tags with --all."""
    from deskctl.services.tags import TagService

    if delete_all == (tag_ref is not None):
        raise click.UsageError("Pass either TAG or --all.")
    service = TagService(app.workspace)
    app.emit(service.delete_all() if delete_all else service.delete(tag_ref))


@tag.command(examples="  deskctl tag suggest\n  deskctl tag suggest --assign")
@click.option("--assign", "then_assign", is_flag=True, help="Assign items right after.")
@click.pass_obj
def suggest(app: AppContext, then_assign: bool) -> None:
    """Ask tag plugins for new tag proposals."""
    from deskctl.services.tags import TagService

    service = TagService(app.workspace)
    result = service.suggest()
    if then_assign and result.ok:
        app.emit(result)
        result = service.assign()
    app.emit(result)


@tag.command(examples="  deskctl tag assign")
@click.pass_obj
def assign(app: AppContext) -> None:
    """Ask tag plugins to distribute item labels over existing tags."""
    from deskctl.services.tags import TagService

    app.emit(TagService(app.workspace).assign())
