"""Built-in offline tagger: groups desktop items by file category.

Answers the ``suggest_tags`` / ``assign_tags`` hooks without any remote
service, so ``deskctl tag suggest`` works out of the box. Richer taggers
(e.g. LLM-backed) can be installed as entry-point plugins alongside it;
their results are merged by the tag service.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from deskctl.config.models import DEFAULT_TAG_PALETTE
from deskctl.plugins.hookspecs import hookimpl

CATEGORY_EXTENSIONS: dict[str, frozenset[str]] = {
    "Documents": frozenset(
        {".doc", ".docx", ".pdf", ".txt", ".md", ".rtf", ".odt", ".xls", ".xlsx", ".csv",
         ".ppt", ".pptx"}
    ),
    "Images": frozenset({".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".svg"}),
    "Media": frozenset({".mp3", ".wav", ".flac", ".mp4", ".mov", ".mkv", ".avi"}),
    "Archives": frozenset({".zip", ".rar", ".7z", ".tar", ".gz"}),
    "Code": frozenset({".py", ".js", ".ts", ".html", ".css", ".json", ".java", ".c", ".cpp"}),
}

# Item types that map straight to a category.
TYPE_CATEGORIES: dict[str, str] = {
    "app": "Apps",
    "folder": "Folders",
    "image": "Images",
    "settings": "Apps",
}


def categorize(label: str, item_type: str) -> str | None:
    """Category name for an item, or None when nothing fits."""
    if item_type in TYPE_CATEGORIES:
        return TYPE_CATEGORIES[item_type]
    dot = label.rfind(".")
    if dot <= 0:
        return None
    ext = label[dot:].lower()
    return next((name for name, exts in CATEGORY_EXTENSIONS.items() if ext in exts), None)


class CategoryTagger:
    """Suggest and assign tags from file extensions and item types."""

    def __init__(self, palette: Sequence[str] | None = None) -> None:
        self._palette = list(palette or DEFAULT_TAG_PALETTE)

    def _groups(self, items: list[dict[str, Any]]) -> dict[str, list[str]]:
        groups: dict[str, list[str]] = {}
        for item in items:
            label = str(item.get("label", ""))
            category = categorize(label, str(item.get("type", "")))
            if category is not None:
                groups.setdefault(category, []).append(label)
        return groups

    @hookimpl
    def suggest_tags(self, items: list[dict[str, Any]]) -> list[dict[str, Any]]:
        groups = self._groups(items)
        return [
            {"name": name, "color": self._palette[index % len(self._palette)]}
            for index, name in enumerate(sorted(groups))
        ]

    @hookimpl
    def assign_tags(
        self,
        items: list[dict[str, Any]],
        existing_tags: list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        groups = {name.casefold(): labels for name, labels in self._groups(items).items()}
        assignments: list[dict[str, Any]] = []
        for tag in existing_tags:
            labels = groups.get(str(tag.get("name", "")).casefold())
            if labels:
                assignments.append({"tagName": tag["name"], "files": labels})
        return assignments
