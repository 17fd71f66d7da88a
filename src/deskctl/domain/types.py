"""Item categories and rule vocabulary enums.

These enums define the five desktop item categories and the keyword
vocabulary decoded from rule text.
"""

from __future__ import annotations

from enum import StrEnum


class ItemType(StrEnum):
    """Category of a desktop item."""

    APP = "app"
    FOLDER = "folder"
    FILE = "file"
    IMAGE = "image"
    SETTINGS = "settings"


class SortField(StrEnum):
    """Keys accepted by ``Sort by <field>`` actions."""

    NAME = "name"
    LAST_ACCESSED = "last_accessed"
    LAST_MODIFIED = "last_modified"
    TYPE = "type"
    FILE_SIZE = "file_size"


class TimeField(StrEnum):
    """Timestamp fields addressable from ``Time > ...`` subjects."""

    LAST_ACCESSED = "last_accessed"
    LAST_MODIFIED = "last_modified"
    CREATED = "created_time"


class TimeMode(StrEnum):
    """Comparison modes for ``Time > ...`` subjects."""

    WITHIN = "within"
    OVER = "over"
    BEFORE = "before"
    AFTER = "after"


class TimeUnit(StrEnum):
    """Duration units for ``within``/``over`` time subjects."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
