"""Desktop data model: items, tags, regions, rules, history entries.

All models are frozen. Operations never mutate a collection in place;
they build new models via ``model_copy(update=...)`` and return new lists.

JSON uses camelCase aliases (``imageUrl``, ``lastModified``,
``selectedRegion`` ...) so desktop snapshots written by the web front-end
load unchanged. Snake_case names are accepted on input as well.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from deskctl.domain.types import ItemType

_MODEL_CONFIG: dict[str, Any] = {
    "frozen": True,
    "alias_generator": to_camel,
    "populate_by_name": True,
}


def _as_utc(value: datetime | None) -> datetime | None:
    """Treat naive timestamps as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class DesktopItem(BaseModel):
    """A single icon on the simulated desktop."""

    model_config = _MODEL_CONFIG

    id: str
    label: str
    type: ItemType = ItemType.FILE
    x: int = 0
    y: int = 0
    image_url: str | None = None
    path: str | None = None
    created_time: datetime | None = None
    last_modified: datetime | None = None
    last_accessed: datetime | None = None
    file_size: int | None = None

    @field_validator("created_time", "last_modified", "last_accessed")
    @classmethod
    def _utc_timestamps(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    def moved_to(self, x: int, y: int) -> DesktopItem:
        """Return a copy of this item at ``(x, y)``."""
        if (x, y) == (self.x, self.y):
            return self
        return self.model_copy(update={"x": x, "y": y})


class Tag(BaseModel):
    """A named, colored group of item labels.

    Membership is keyed by label, not id: two items sharing a label are
    both members.
    """

    model_config = _MODEL_CONFIG

    id: str
    name: str
    color: str = "#fb923c"
    items: list[str] = Field(default_factory=list)
    expanded: bool = True


class Region(BaseModel):
    """Axis-aligned rectangle in reference-canvas pixels."""

    model_config = _MODEL_CONFIG

    x: float
    y: float
    width: float
    height: float

    def contains_box(self, x: float, y: float, width: float, height: float) -> bool:
        """True when the box at ``(x, y)`` of the given size lies fully inside."""
        return (
            x >= self.x
            and x + width <= self.x + self.width
            and y >= self.y
            and y + height <= self.y + self.height
        )


class Rule(BaseModel):
    """A persisted rule: raw ``"<Subject> + <Action>"`` text.

    A rule with ``rules`` is a saved rule set; its sub-rules run in order.
    ``selected_region`` scopes matching to items fully inside the region.
    """

    model_config = _MODEL_CONFIG

    id: str
    text: str = ""
    name: str | None = None
    rules: list[Rule] | None = None
    selected_region: Region | None = None


class HistoryEntry(BaseModel):
    """Snapshot of the whole item collection at one successful apply."""

    model_config = _MODEL_CONFIG

    id: str
    time: datetime
    title: str
    starred: bool = False
    items: list[DesktopItem] = Field(default_factory=list)

    @field_validator("time")
    @classmethod
    def _utc_time(cls, value: datetime) -> datetime:
        return _as_utc(value)  # type: ignore[return-value]


Rule.model_rebuild()


def dump_items(items: list[DesktopItem]) -> list[dict[str, Any]]:
    """Serialize items to camelCase JSON-ready dicts."""
    return [item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in items]
