"""Tests for the desktop description export parser."""

from __future__ import annotations

import pytest

from deskctl.domain.importer import infer_type, parse_desktop_info
from deskctl.domain.types import ItemType

EXPORT = """\
[1] Report.docx
    位置: (120, 40)
    路徑: C:\\Users\\me\\Desktop\\Report.docx
    圖示: 已儲存 (Icon file: icon_1.png)
-----------------------------------
[2] Projects
    位置: (20, 20)
    路徑: C:\\Users\\me\\Desktop\\Projects
    圖示: 資料夾
-----------------------------------
[3] Chrome.lnk
    位置: (20, 130)
    路徑: 找不到路徑
    圖示: 已儲存
-----------------------------------
"""


class TestParseDesktopInfo:
    def test_parses_blocks_in_order(self) -> None:
        items = parse_desktop_info(EXPORT)
        assert [(i.id, i.label) for i in items] == [
            ("1", "Report.docx"),
            ("2", "Projects"),
            ("3", "Chrome.lnk"),
        ]
        assert items[0].position == (120, 40)
        assert items[0].path == "C:\\Users\\me\\Desktop\\Report.docx"

    def test_infers_types(self) -> None:
        items = parse_desktop_info(EXPORT)
        assert [i.type for i in items] == [ItemType.FILE, ItemType.FOLDER, ItemType.APP]

    def test_missing_path_is_unset(self) -> None:
        assert parse_desktop_info(EXPORT)[2].path is None

    def test_icon_map_resolves_image_urls(self) -> None:
        items = parse_desktop_info(EXPORT, {"icon_1.png": "file:///icons/icon_1.png"})
        assert items[0].image_url == "file:///icons/icon_1.png"
        assert items[1].image_url is None

    def test_last_block_without_separator(self) -> None:
        items = parse_desktop_info("[9] photo.JPG\n    位置: (0, 0)\n")
        assert len(items) == 1
        assert items[0].type == ItemType.IMAGE

    def test_blocks_without_id_are_dropped(self) -> None:
        text = "[] nameless\n    位置: (1, 2)\n-----------------------------------\n"
        assert parse_desktop_info(text) == []

    def test_unknown_lines_are_ignored(self) -> None:
        text = "Desktop export v2\n[4] a.txt\n    Owner: me\n    位置: (-5, 7)\n"
        items = parse_desktop_info(text)
        assert len(items) == 1
        assert items[0].position == (-5, 7)


class TestInferType:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("photo.PNG", ItemType.IMAGE),
            ("setup.exe", ItemType.APP),
            ("notes.txt", ItemType.FILE),
            ("README", ItemType.FILE),
            (".hidden", ItemType.FILE),
        ],
    )
    def test_by_extension(self, name: str, expected: ItemType) -> None:
        assert infer_type(name) == expected

    def test_folder_flag_wins(self) -> None:
        assert infer_type("archive.zip", is_folder=True) == ItemType.FOLDER
