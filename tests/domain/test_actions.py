"""Tests for action execution."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import pytest

from deskctl.domain.actions import (
    FOLDER_ICON,
    ZIP_ICON,
    ActionContext,
    apply_action,
)
from deskctl.domain.models import DesktopItem, Region
from deskctl.domain.rules import DeleteAction, PutInFolderAction, SortAction, ZipAction
from deskctl.domain.types import ItemType, SortField

MakeItem = Callable[..., DesktopItem]

NOW = datetime(2024, 6, 15, tzinfo=UTC)


@pytest.fixture
def ctx() -> ActionContext:
    return ActionContext(now=NOW, new_id=lambda kind: f"{kind}-new")


def _by_id(items: list[DesktopItem]) -> dict[str, DesktopItem]:
    return {item.id: item for item in items}


class TestSort:
    def test_sort_by_name(self, make_item: MakeItem, ctx: ActionContext) -> None:
        items = [make_item("1", "b.txt", x=500, y=500), make_item("2", "a.txt", x=600, y=600)]
        result = apply_action(SortAction(field=SortField.NAME), items, items, ctx)
        assert result is not None
        assert result.description == "Sorted 2 files alphabetically by name"
        assert [(i.id, i.position) for i in result.items] == [("2", (20, 20)), ("1", (20, 130))]

    def test_sort_by_name_collates_accents(self, make_item: MakeItem, ctx: ActionContext) -> None:
        items = [
            make_item("z", "zebra.txt"),
            make_item("e", "Éclair.txt"),
            make_item("a", "apple.txt"),
            make_item("b", "Banana.txt"),
        ]
        result = apply_action(SortAction(field=SortField.NAME), items, items, ctx)
        assert result is not None
        assert [i.id for i in result.items] == ["a", "b", "e", "z"]

    def test_untouched_items_keep_their_cells(self, make_item: MakeItem, ctx: ActionContext) -> None:
        fixed = make_item("c", "c.txt", x=20, y=20)
        a = make_item("a", "a.txt", x=700, y=700)
        b = make_item("b", "b.txt", x=800, y=800)
        result = apply_action(SortAction(field=SortField.NAME), [a, b], [fixed, a, b], ctx)
        assert result is not None
        assert [i.id for i in result.items] == ["a", "b", "c"]
        positions = _by_id(result.items)
        assert positions["c"].position == (20, 20)
        assert positions["a"].position == (20, 130)
        assert positions["b"].position == (20, 240)

    def test_sort_by_size_largest_first(self, make_item: MakeItem, ctx: ActionContext) -> None:
        items = [
            make_item("small", "s", file_size=10),
            make_item("none", "n"),
            make_item("big", "b", file_size=1000),
        ]
        result = apply_action(SortAction(field=SortField.FILE_SIZE), items, items, ctx)
        assert result is not None
        assert [i.id for i in result.items] == ["big", "small", "none"]
        assert result.description == "Sorted 3 files by file size"

    def test_sort_by_modified_newest_first(self, make_item: MakeItem, ctx: ActionContext) -> None:
        items = [
            make_item("old", "o", last_modified=datetime(2020, 1, 1, tzinfo=UTC)),
            make_item("never", "n"),
            make_item("new", "w", last_modified=datetime(2024, 1, 1, tzinfo=UTC)),
        ]
        result = apply_action(SortAction(field=SortField.LAST_MODIFIED), items, items, ctx)
        assert result is not None
        assert [i.id for i in result.items] == ["new", "old", "never"]

    def test_sort_by_type(self, make_item: MakeItem, ctx: ActionContext) -> None:
        items = [
            make_item("txt", "b.txt"),
            make_item("notes", "notes"),
            make_item("docx", "a.docx"),
            make_item("app", "Chrome", type=ItemType.APP),
            make_item("dir", "Projects", type=ItemType.FOLDER),
        ]
        result = apply_action(SortAction(field=SortField.TYPE), items, items, ctx)
        assert result is not None
        assert [i.id for i in result.items] == ["dir", "docx", "txt", "app", "notes"]

    def test_region_limits_target_cells(self, make_item: MakeItem, ctx: ActionContext) -> None:
        region_ctx = ActionContext(region=Region(x=0, y=0, width=200, height=200), now=NOW)
        items = [make_item("1", "a", x=500, y=500), make_item("2", "b", x=600, y=600)]
        result = apply_action(SortAction(field=SortField.NAME), items, items, region_ctx)
        assert result is not None
        positions = _by_id(result.items)
        assert positions["1"].position == (20, 20)
        # No free cell left inside the region: the item stays put.
        assert positions["2"].position == (600, 600)


class TestPutInFolder:
    def test_creates_folder_at_first_free_cell(self, make_item: MakeItem, ctx: ActionContext) -> None:
        other = make_item("3", "keep.txt", x=20, y=20)
        matched = [make_item("1", "a.txt", x=500, y=500), make_item("2", "b.txt", x=600, y=600)]
        result = apply_action(PutInFolderAction(name="Docs"), matched, [other, *matched], ctx)
        assert result is not None
        assert result.description == 'Put 2 file(s) into "Docs" folder'
        folder = result.items[-1]
        assert folder.id == "folder-new"
        assert folder.type == ItemType.FOLDER
        assert folder.label == "Docs"
        assert folder.image_url == FOLDER_ICON
        assert folder.created_time == NOW
        assert folder.position == (20, 130)
        positions = _by_id(result.items)
        assert positions["1"].position == positions["2"].position == (20, 130)
        assert positions["3"].position == (20, 20)

    def test_reuses_existing_folder(self, make_item: MakeItem, ctx: ActionContext) -> None:
        folder = make_item("f", "Docs", type=ItemType.FOLDER, x=120, y=20)
        items = [folder, make_item("1", "a.txt", x=500, y=500), make_item("2", "b", x=20, y=20)]
        # The folder itself is part of the match and is not counted.
        result = apply_action(PutInFolderAction(name="Docs"), items, items, ctx)
        assert result is not None
        assert len(result.items) == 3
        assert result.description == 'Put 2 file(s) into "Docs" folder'
        assert all(item.position == (120, 20) for item in result.items)


class TestDelete:
    def test_removes_only_matched(self, make_item: MakeItem, ctx: ActionContext) -> None:
        items = [make_item("1", "a"), make_item("2", "b"), make_item("3", "c")]
        result = apply_action(DeleteAction(), [items[1]], items, ctx)
        assert result is not None
        assert [i.id for i in result.items] == ["1", "3"]
        assert result.description == "Deleted 1 file(s)"


class TestZip:
    def _items(self, make_item: MakeItem) -> list[DesktopItem]:
        return [
            make_item("a", "a.txt", x=320, y=20, file_size=5),
            make_item("b", "b.txt", x=20, y=240, file_size=7),
            make_item("c", "c.txt", x=20, y=20),
        ]

    def test_unnamed_packs_from_first_member(self, make_item: MakeItem, ctx: ActionContext) -> None:
        items = self._items(make_item)
        result = apply_action(ZipAction(), items[:2], items, ctx)
        assert result is not None
        assert result.description == "Zipped 2 file(s) together"
        assert [i.id for i in result.items] == ["a", "b", "c"]
        positions = _by_id(result.items)
        assert positions["b"].position == (20, 240)
        assert positions["a"].position == (20, 350)
        assert positions["c"].position == (20, 20)

    def test_named_creates_marker(self, make_item: MakeItem, ctx: ActionContext) -> None:
        items = self._items(make_item)
        result = apply_action(ZipAction(name="Old"), items[:2], items, ctx)
        assert result is not None
        assert result.description == 'Zipped 2 file(s) into "Old.zip"'
        marker = result.items[-1]
        assert marker.id == "zip-new"
        assert marker.label == "Old.zip"
        assert marker.image_url == ZIP_ICON
        assert marker.file_size == 12
        assert marker.position == (20, 130)
        positions = _by_id(result.items)
        assert positions["b"].position == (20, 240)
        assert positions["a"].position == (20, 350)


def test_unrecognized_action_returns_none(make_item: MakeItem) -> None:
    items = [make_item("1", "a")]
    assert apply_action(None, items, items) is None
