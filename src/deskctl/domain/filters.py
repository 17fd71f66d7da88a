"""Subject filtering: select the items a rule applies to.

Pure functions. Unknown subjects match nothing; nothing here raises for
malformed input.
"""

from __future__ import annotations

import calendar
import logging
import re
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, time, timedelta

from deskctl.domain.grid import DEFAULT_GRID, GridSpec
from deskctl.domain.models import DesktopItem, Region, Tag
from deskctl.domain.rules import (
    AllFiles,
    FileTypeSubject,
    PatternSubject,
    Subject,
    TagSubject,
    TimeSubject,
    UnknownSubject,
)
from deskctl.domain.types import ItemType, TimeMode, TimeUnit

logger = logging.getLogger(__name__)

_PATH_SEPARATORS = re.compile(r"[/\\]")


# ---------------------------------------------------------------------------
# Item helpers
# ---------------------------------------------------------------------------


def file_name(item: DesktopItem) -> str:
    """Basename of the item path, or its label when it has no path."""
    if item.path:
        return _PATH_SEPARATORS.split(item.path)[-1]
    return item.label


def file_extension(item: DesktopItem) -> str:
    """Lowercased extension including the dot, or ``""``.

    Valid extensions have at least two characters after the last dot and
    are not purely numeric, so ``"v1.2"`` has no extension.

    Examples:
        >>> file_extension(DesktopItem(id="1", label="Report.TXT"))
        '.txt'
        >>> file_extension(DesktopItem(id="2", label="v1.2"))
        ''
    """
    name = file_name(item)
    dot = name.rfind(".")
    if dot <= 0 or dot >= len(name) - 1:
        return ""
    ext = name[dot + 1 :]
    if len(ext) < 2 or ext.isdigit():
        return ""
    return f".{ext.lower()}"


def in_region(item: DesktopItem, region: Region, grid: GridSpec = DEFAULT_GRID) -> bool:
    """True when the item's icon footprint lies entirely inside *region*."""
    return region.contains_box(item.x, item.y, grid.icon_width, grid.icon_height)


def items_in_region(
    items: Iterable[DesktopItem],
    region: Region,
    grid: GridSpec = DEFAULT_GRID,
) -> list[DesktopItem]:
    return [item for item in items if in_region(item, region, grid)]


# ---------------------------------------------------------------------------
# SubjectFilter
# ---------------------------------------------------------------------------


def filter_items(
    subject: Subject,
    items: Sequence[DesktopItem],
    tags: Sequence[Tag] = (),
    *,
    region: Region | None = None,
    grid: GridSpec = DEFAULT_GRID,
    now: datetime | None = None,
) -> list[DesktopItem]:
    """Return the items selected by *subject*, in collection order.

    With a *region*, only items fully inside it are candidates.
    """
    candidates = list(items) if region is None else items_in_region(items, region, grid)

    match subject:
        case AllFiles():
            return candidates
        case TagSubject(name=name):
            return _by_tag(candidates, name, tags)
        case FileTypeSubject(value=value):
            return _by_file_type(candidates, value)
        case TimeSubject():
            return _by_time(candidates, subject, now or datetime.now(UTC))
        case PatternSubject(pattern=pattern):
            return _by_pattern(candidates, pattern)
        case UnknownSubject(text=text):
            logger.debug("Unrecognized subject matches nothing: %s", text)
            return []
    return []


def _by_tag(items: list[DesktopItem], name: str, tags: Sequence[Tag]) -> list[DesktopItem]:
    tag = next((t for t in tags if t.name == name), None)
    if tag is None:
        return []
    labels = set(tag.items)
    return [item for item in items if item.label in labels]


def _by_file_type(items: list[DesktopItem], value: str) -> list[DesktopItem]:
    if value == "/":
        return [item for item in items if item.type == ItemType.FOLDER]
    if value.casefold() in {t.value for t in ItemType}:
        return [item for item in items if item.type == value.casefold()]

    wanted = value.lower() if value.startswith(".") else f".{value.lower()}"
    # Folders never match by extension, even when their name has a dot.
    return [
        item
        for item in items
        if item.type != ItemType.FOLDER and file_extension(item) == wanted
    ]


def _by_pattern(items: list[DesktopItem], pattern: str) -> list[DesktopItem]:
    regex = re.compile(
        "".join(".*" if ch == "*" else "." if ch == "?" else re.escape(ch) for ch in pattern),
        re.IGNORECASE,
    )
    return [item for item in items if regex.fullmatch(file_name(item))]


# ---------------------------------------------------------------------------
# Time predicates
# ---------------------------------------------------------------------------


def shift_months(moment: datetime, months: int) -> datetime:
    """Move *moment* by whole calendar months, clamping the day."""
    years, month_index = divmod(moment.month - 1 + months, 12)
    year = moment.year + years
    month = month_index + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def duration_threshold(now: datetime, amount: int, unit: TimeUnit) -> datetime:
    """The instant *amount* *unit*\\s before *now*."""
    if unit == TimeUnit.DAY:
        return now - timedelta(days=amount)
    if unit == TimeUnit.WEEK:
        return now - timedelta(weeks=amount)
    if unit == TimeUnit.MONTH:
        return shift_months(now, -amount)
    return shift_months(now, -12 * amount)


def _by_time(items: list[DesktopItem], subject: TimeSubject, now: datetime) -> list[DesktopItem]:
    if subject.on is not None:
        threshold = datetime.combine(subject.on, time.min, tzinfo=UTC)
    elif subject.amount is not None and subject.unit is not None:
        threshold = duration_threshold(now, subject.amount, subject.unit)
    else:
        return []

    matched: list[DesktopItem] = []
    for item in items:
        stamp: datetime | None = getattr(item, subject.field.value)
        if stamp is None:
            continue
        if subject.mode == TimeMode.WITHIN:
            hit = threshold <= stamp <= now
        elif subject.mode == TimeMode.OVER:
            hit = stamp < threshold
        elif subject.mode == TimeMode.BEFORE:
            hit = stamp.astimezone(UTC).date() < threshold.date()
        else:
            hit = stamp.astimezone(UTC).date() >= threshold.date()
        if hit:
            matched.append(item)
    return matched
