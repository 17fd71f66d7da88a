"""Shared service-layer helper functions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from deskctl.domain.models import DesktopItem, Rule, Tag, dump_items


def unique_name(base: str, existing: Iterable[str]) -> str:
    """First of ``base``, ``base1``, ``base2`` ... not in *existing*.

    Examples:
        >>> unique_name("NewTag", [])
        'NewTag'
        >>> unique_name("NewTag", ["NewTag", "NewTag1"])
        'NewTag2'
    """
    taken = set(existing)
    name, counter = base, 0
    while name in taken:
        counter += 1
        name = f"{base}{counter}"
    return name


def item_payload(items: Sequence[DesktopItem]) -> list[dict[str, Any]]:
    """Full item dicts for ServiceResult.data."""
    return dump_items(list(items))


def plugin_items(items: Sequence[DesktopItem]) -> list[dict[str, Any]]:
    """The ``{id, label, type}`` view handed to collaborator hooks."""
    return [{"id": item.id, "label": item.label, "type": item.type.value} for item in items]


def rule_payload(rule: Rule) -> dict[str, Any]:
    return rule.model_dump(mode="json", by_alias=True, exclude_none=True)


def tag_payload(tag: Tag) -> dict[str, Any]:
    return tag.model_dump(mode="json", by_alias=True)


def moved_count(before: Sequence[DesktopItem], after: Sequence[DesktopItem]) -> int:
    """Number of items present in both lists whose position changed."""
    positions = {item.id: item.position for item in before}
    return sum(1 for item in after if item.id in positions and positions[item.id] != item.position)
