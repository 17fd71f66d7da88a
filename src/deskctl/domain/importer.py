"""Parse the line-oriented desktop description export into items.

The exporter writes one block per desktop icon::

    [3] Report.docx
        位置: (120, 40)
        路徑: C:\\Users\\me\\Desktop\\Report.docx
        圖示: 已儲存 (Icon file: icon_3_Report.docx.png)
    -----------------------------------

Blocks missing an id or a label are dropped. Unknown lines are ignored.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from deskctl.domain.models import DesktopItem
from deskctl.domain.types import ItemType

SEPARATOR = "-----------------------------------"
PATH_NOT_FOUND = "找不到路徑"
FOLDER_MARKER = "資料夾"

_HEADER = re.compile(r"^\[(?P<id>[^\]]+)\] (?P<label>.+)$")
_POSITION = re.compile(r"^位置: \((?P<x>-?\d+), (?P<y>-?\d+)\)")
_PATH = re.compile(r"^路徑: (?P<path>.+)$")
_ICON = re.compile(r"^圖示: (?P<kind>.*?)(?: \(Icon file: (?P<file>.+)\))?$")

IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".svg", ".ico"})
APP_EXTENSIONS = frozenset({".lnk", ".exe", ".url", ".app"})


def infer_type(name: str, *, is_folder: bool = False) -> ItemType:
    """Guess an item category from its file name."""
    if is_folder:
        return ItemType.FOLDER
    dot = name.rfind(".")
    ext = name[dot:].lower() if dot > 0 else ""
    if ext in IMAGE_EXTENSIONS:
        return ItemType.IMAGE
    if ext in APP_EXTENSIONS:
        return ItemType.APP
    return ItemType.FILE


def _finish(block: dict[str, Any], items: list[DesktopItem]) -> None:
    if not block.get("id") or not block.get("label"):
        return
    name = block.get("path") or block["label"]
    block["type"] = infer_type(name, is_folder=block.pop("is_folder", False))
    items.append(DesktopItem(**block))


def parse_desktop_info(text: str, icon_map: Mapping[str, str] | None = None) -> list[DesktopItem]:
    """Parse exporter output into items, in file order.

    *icon_map* resolves the exporter's icon file names to image URLs;
    unresolved icons leave ``image_url`` unset.
    """
    icons = icon_map or {}
    items: list[DesktopItem] = []
    block: dict[str, Any] = {}

    for raw in text.splitlines():
        line = raw.strip()
        if line.startswith(SEPARATOR):
            _finish(block, items)
            block = {}
            continue

        if m := _HEADER.match(line):
            block["id"] = m.group("id").strip()
            block["label"] = m.group("label").strip()
        elif m := _POSITION.match(line):
            block["x"] = int(m.group("x"))
            block["y"] = int(m.group("y"))
        elif m := _PATH.match(line):
            path = m.group("path").strip()
            if path != PATH_NOT_FOUND:
                block["path"] = path
        elif m := _ICON.match(line):
            if m.group("kind").strip() == FOLDER_MARKER:
                block["is_folder"] = True
            icon_file = m.group("file")
            if icon_file and icon_file in icons:
                block["image_url"] = icons[icon_file]

    _finish(block, items)
    return items
