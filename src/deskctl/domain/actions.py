"""Action execution: transform the matched subset of a collection.

Every action returns a new item list plus a one-line description used
for history titles. Input lists and items are never mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import cache

import pyuca

from deskctl.domain.filters import file_extension
from deskctl.domain.grid import (
    DEFAULT_CANVAS,
    DEFAULT_GRID,
    Canvas,
    Cell,
    GridSpec,
    first_free_cell,
    free_cells,
)
from deskctl.domain.ids import generate_id
from deskctl.domain.models import DesktopItem, Region
from deskctl.domain.rules import (
    Action,
    DeleteAction,
    PutInFolderAction,
    SortAction,
    ZipAction,
)
from deskctl.domain.types import ItemType, SortField

logger = logging.getLogger(__name__)

FOLDER_ICON = "/icons/documents.svg"
ZIP_ICON = "/folder-locked.png"

_SORT_PHRASES: dict[SortField, str] = {
    SortField.NAME: "alphabetically by name",
    SortField.LAST_ACCESSED: "by last accessed time",
    SortField.LAST_MODIFIED: "by last modified time",
    SortField.TYPE: "by type",
    SortField.FILE_SIZE: "by file size",
}


@dataclass(frozen=True)
class ActionContext:
    """Placement parameters shared by every action in a run."""

    canvas: Canvas = DEFAULT_CANVAS
    grid: GridSpec = DEFAULT_GRID
    region: Region | None = None
    now: datetime = field(default_factory=lambda: datetime.now(UTC))
    new_id: Callable[[str], str] = generate_id


@dataclass(frozen=True)
class ActionResult:
    items: list[DesktopItem]
    description: str


def apply_action(
    action: Action | None,
    matched: Sequence[DesktopItem],
    items: Sequence[DesktopItem],
    context: ActionContext | None = None,
) -> ActionResult | None:
    """Apply *action* to *matched* (a subset of *items*).

    Returns None for an unrecognized action so the caller can treat the
    rule as a no-op.
    """
    ctx = context or ActionContext()
    match action:
        case SortAction(field=sort_field):
            return _sort(sort_field, matched, items, ctx)
        case PutInFolderAction(name=name):
            return _put_in_folder(name, matched, items, ctx)
        case DeleteAction():
            return _delete(matched, items)
        case ZipAction(name=name):
            return _zip(name, matched, items, ctx)
    return None


# ---------------------------------------------------------------------------
# Sort
# ---------------------------------------------------------------------------


@cache
def _collator() -> pyuca.Collator:
    """Unicode collation (DUCET); loading its key table is slow, so build it once."""
    return pyuca.Collator()


def _name_key(item: DesktopItem) -> tuple[tuple[int, ...], str]:
    return (_collator().sort_key(item.label.casefold()), item.label)


def _recency_key(attr: str) -> Callable[[DesktopItem], tuple[bool, float]]:
    """Most recent first; items without the timestamp sort last."""

    def key(item: DesktopItem) -> tuple[bool, float]:
        stamp: datetime | None = getattr(item, attr)
        if stamp is None:
            return (True, 0.0)
        return (False, -stamp.timestamp())

    return key


def _type_key(item: DesktopItem) -> tuple[int, str, str]:
    """Folders first, then by extension, then extension-less by category."""
    if item.type == ItemType.FOLDER:
        return (0, "", item.label.casefold())
    ext = file_extension(item)
    if ext:
        return (1, ext, "")
    return (2, "", item.type.value)


def sort_key(sort_field: SortField) -> Callable[[DesktopItem], tuple[object, ...]]:
    """Key function implementing the ordering for *sort_field*."""
    if sort_field == SortField.NAME:
        return _name_key
    if sort_field == SortField.LAST_ACCESSED:
        return _recency_key("last_accessed")
    if sort_field == SortField.LAST_MODIFIED:
        return _recency_key("last_modified")
    if sort_field == SortField.FILE_SIZE:
        return lambda item: (-(item.file_size or 0),)
    return _type_key


def _sort(
    sort_field: SortField,
    matched: Sequence[DesktopItem],
    items: Sequence[DesktopItem],
    ctx: ActionContext,
) -> ActionResult:
    matched_ids = {item.id for item in matched}
    untouched = [item for item in items if item.id not in matched_ids]
    ordered = sorted(matched, key=sort_key(sort_field))

    slots = free_cells(
        {item.position for item in untouched}, ctx.canvas, ctx.grid, region=ctx.region
    )
    arranged: list[DesktopItem] = []
    for item in ordered:
        slot = next(slots, None)
        # No free cell left: the item keeps its position.
        arranged.append(item if slot is None else item.moved_to(*slot))

    return ActionResult(
        items=arranged + untouched,
        description=f"Sorted {len(arranged)} files {_SORT_PHRASES[sort_field]}",
    )


# ---------------------------------------------------------------------------
# Put in folder
# ---------------------------------------------------------------------------


def _find_folder(items: Sequence[DesktopItem], label: str) -> DesktopItem | None:
    return next(
        (item for item in items if item.type == ItemType.FOLDER and item.label == label),
        None,
    )


def _put_in_folder(
    name: str,
    matched: Sequence[DesktopItem],
    items: Sequence[DesktopItem],
    ctx: ActionContext,
) -> ActionResult:
    matched_ids = {item.id for item in matched}
    folder = _find_folder(items, name)
    created: list[DesktopItem] = []

    if folder is None:
        occupied = {item.position for item in items if item.id not in matched_ids}
        x, y = first_free_cell(occupied, ctx.canvas, ctx.grid, region=ctx.region)
        folder = DesktopItem(
            id=ctx.new_id("folder"),
            label=name,
            type=ItemType.FOLDER,
            x=x,
            y=y,
            image_url=FOLDER_ICON,
            created_time=ctx.now,
            last_modified=ctx.now,
            last_accessed=ctx.now,
            file_size=0,
        )
        created.append(folder)
        logger.debug("Created folder %r at (%d, %d)", name, x, y)

    moved = 0
    result: list[DesktopItem] = []
    for item in items:
        if item.id in matched_ids and item.id != folder.id:
            result.append(item.moved_to(folder.x, folder.y))
            moved += 1
        else:
            result.append(item)

    return ActionResult(
        items=result + created,
        description=f'Put {moved} file(s) into "{name}" folder',
    )


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


def _delete(matched: Sequence[DesktopItem], items: Sequence[DesktopItem]) -> ActionResult:
    matched_ids = {item.id for item in matched}
    remaining = [item for item in items if item.id not in matched_ids]
    return ActionResult(
        items=remaining,
        description=f"Deleted {len(items) - len(remaining)} file(s)",
    )


# ---------------------------------------------------------------------------
# Zip (cosmetic grouping)
# ---------------------------------------------------------------------------


def _zip(
    name: str | None,
    matched: Sequence[DesktopItem],
    items: Sequence[DesktopItem],
    ctx: ActionContext,
) -> ActionResult:
    """Pack matched items into consecutive free cells. Nothing is archived."""
    grid = ctx.grid
    matched_ids = {item.id for item in matched}
    created: list[DesktopItem] = []

    marker: DesktopItem | None = None
    if name is not None:
        marker = _find_folder(items, f"{name}.zip")
        matched_ids.discard(marker.id if marker else "")

    members = [item for item in items if item.id in matched_ids]
    occupied = {item.position for item in items if item.id not in matched_ids}

    if name is not None and marker is None:
        x, y = first_free_cell(occupied, ctx.canvas, grid, region=ctx.region)
        marker = DesktopItem(
            id=ctx.new_id("zip"),
            label=f"{name}.zip",
            type=ItemType.FOLDER,
            x=x,
            y=y,
            image_url=ZIP_ICON,
            created_time=ctx.now,
            last_modified=ctx.now,
            last_accessed=ctx.now,
            file_size=sum(item.file_size or 0 for item in members),
        )
        occupied.add(marker.position)
        created.append(marker)

    members.sort(key=lambda item: grid.snap(item.x, item.y))
    if marker is not None:
        anchor = grid.snap(marker.x, marker.y)
    elif members:
        anchor = grid.snap(members[0].x, members[0].y)
    else:
        anchor = (0, 0)

    slots = _cells_from(anchor, occupied, ctx)
    placed: dict[str, DesktopItem] = {}
    for item in members:
        slot = next(slots, None)
        placed[item.id] = item if slot is None else item.moved_to(*slot)

    result = [placed.get(item.id, item) for item in items] + created
    if name is None:
        description = f"Zipped {len(members)} file(s) together"
    else:
        description = f'Zipped {len(members)} file(s) into "{name}.zip"'
    return ActionResult(items=result, description=description)


def _cells_from(anchor: Cell, occupied: set[Cell], ctx: ActionContext) -> Iterator[Cell]:
    """Free cells in column order starting at *anchor*, wrapping to the ones before it."""
    before: list[Cell] = []
    for cell in free_cells(occupied, ctx.canvas, ctx.grid, region=ctx.region):
        if ctx.grid.snap(*cell) >= anchor:
            yield cell
        else:
            before.append(cell)
    yield from before
