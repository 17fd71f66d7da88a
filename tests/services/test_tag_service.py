"""Tests for TagService."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from deskctl.domain.models import DesktopItem, Tag
from deskctl.domain.session import DesktopSession
from deskctl.domain.types import ItemType
from deskctl.infrastructure.workspace import Workspace
from deskctl.plugins import hookimpl
from deskctl.services.tags import TagService

SeedSession = Callable[..., DesktopSession]


@pytest.fixture
def desktop(seed_session: SeedSession) -> DesktopSession:
    return seed_session(
        items=[
            DesktopItem(id="1", label="a.pdf"),
            DesktopItem(id="2", label="b.png"),
            DesktopItem(id="3", label="Projects", type=ItemType.FOLDER),
            DesktopItem(id="4", label="notes"),
        ],
        tags=[Tag(id="tag-000000000001", name="Work", items=["a.pdf"])],
    )


def _tags(workspace: Workspace) -> list[Tag]:
    state = workspace.store.load()
    assert state is not None
    return state.tags


@pytest.mark.usefixtures("desktop")
class TestCreate:
    def test_default_names_count_up(self, workspace: Workspace) -> None:
        service = TagService(workspace)
        first = service.create().data["tag"]
        second = service.create().data["tag"]
        assert (first["name"], second["name"]) == ("NewTag", "NewTag1")
        assert first["color"] == "#fb923c"
        assert first["id"].startswith("tag-")

    def test_named_with_color(self, workspace: Workspace) -> None:
        tag = TagService(workspace).create("Games", color="#123").data["tag"]
        assert tag["name"] == "Games"
        assert tag["color"] == "#123"
        assert tag["expanded"] is True

    def test_duplicate_name(self, workspace: Workspace) -> None:
        result = TagService(workspace).create("Work")
        assert result.error is not None
        assert result.error.code == "DUPLICATE_NAME"

    def test_invalid_color(self, workspace: Workspace) -> None:
        result = TagService(workspace).create("Games", color="orange")
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"
        assert [t.name for t in _tags(workspace)] == ["Work"]


@pytest.mark.usefixtures("desktop")
class TestEdit:
    def test_rename_by_name(self, workspace: Workspace) -> None:
        result = TagService(workspace).rename("Work", "Office")
        assert result.data["old_name"] == "Work"
        assert _tags(workspace)[0].name == "Office"

    def test_rename_to_taken_name(self, workspace: Workspace) -> None:
        service = TagService(workspace)
        service.create("Games")
        result = service.rename("Games", "Work")
        assert result.error is not None
        assert result.error.code == "DUPLICATE_NAME"

    def test_recolor_by_id(self, workspace: Workspace) -> None:
        TagService(workspace).recolor("tag-000000000001", "#00ff00")
        assert _tags(workspace)[0].color == "#00ff00"

    def test_toggle_expand(self, workspace: Workspace) -> None:
        result = TagService(workspace).toggle_expand("Work")
        assert result.data["tag"]["expanded"] is False

    def test_unknown_tag(self, workspace: Workspace) -> None:
        result = TagService(workspace).toggle_expand("Nope")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_add_item_without_matching_item_warns(self, workspace: Workspace) -> None:
        result = TagService(workspace).add_item("Work", "ghost.txt")
        assert result.ok
        assert result.warnings == ["No desktop item is labelled 'ghost.txt'"]
        assert _tags(workspace)[0].items == ["a.pdf", "ghost.txt"]

    def test_add_item_is_idempotent(self, workspace: Workspace) -> None:
        TagService(workspace).add_item("Work", "a.pdf")
        assert _tags(workspace)[0].items == ["a.pdf"]

    def test_remove_item(self, workspace: Workspace) -> None:
        service = TagService(workspace)
        assert service.remove_item("Work", "a.pdf").ok
        assert _tags(workspace)[0].items == []
        assert not service.remove_item("Work", "a.pdf").ok

    def test_delete_and_delete_all(self, workspace: Workspace) -> None:
        service = TagService(workspace)
        service.create("Games")
        assert service.delete("Work").data["name"] == "Work"
        assert [t.name for t in _tags(workspace)] == ["Games"]
        assert service.delete_all().data["deleted"] == 1
        assert _tags(workspace) == []


@pytest.mark.usefixtures("desktop")
class TestSuggestAndAssign:
    def test_suggest_from_builtin_categories(self, workspace: Workspace) -> None:
        result = TagService(workspace).suggest()
        assert result.ok
        assert result.data["proposed"] == 3
        created = result.data["created"]
        assert [t["name"] for t in created] == ["Documents", "Folders", "Images"]
        assert all(t["expanded"] is False for t in created)
        assert all(t["items"] == [] for t in created)

    def test_suggest_skips_existing_names(self, workspace: Workspace) -> None:
        service = TagService(workspace)
        service.create("documents")
        created = service.suggest().data["created"]
        assert [t["name"] for t in created] == ["Folders", "Images"]

    def test_malformed_plugin_entries_are_dropped(self, workspace: Workspace) -> None:
        class Noisy:
            @hookimpl
            def suggest_tags(self, items: list[dict[str, Any]]) -> list[Any]:
                return ["oops", {"name": "Images", "color": "bad"}, {"name": "Extra"}]

        workspace.plugins.register_plugin(Noisy(), name="noisy")
        result = TagService(workspace).suggest()
        assert "Ignored malformed suggest_tags entry: 'oops'" in result.warnings
        names = [t["name"] for t in result.data["created"]]
        assert names.count("Images") == 1
        assert "Extra" in names
        extra = next(t for t in result.data["created"] if t["name"] == "Extra")
        assert extra["color"] == "#fb923c"

    def test_assign_merges_labels(self, workspace: Workspace) -> None:
        service = TagService(workspace)
        service.create("Images")
        service.create("Documents")
        result = service.assign()
        assert result.data["assigned"] == 2
        by_name = {t.name: t.items for t in _tags(workspace)}
        assert by_name["Images"] == ["b.png"]
        assert by_name["Documents"] == ["a.pdf"]
        assert by_name["Work"] == ["a.pdf"]

    def test_assign_needs_tags(self, workspace: Workspace) -> None:
        service = TagService(workspace)
        service.delete_all()
        result = service.assign()
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


def test_suggest_requires_session(workspace: Workspace) -> None:
    result = TagService(workspace).suggest()
    assert result.error is not None
    assert result.error.code == "NO_SESSION"


class TestHelpers:
    def test_unique_name(self) -> None:
        from deskctl.services._helpers import unique_name

        assert unique_name("NewTag", ["NewTag", "NewTag1", "Other"]) == "NewTag2"

    def test_moved_count_ignores_new_items(self) -> None:
        from deskctl.services._helpers import moved_count

        before = [DesktopItem(id="1", label="a", x=20, y=20)]
        after = [
            DesktopItem(id="1", label="a", x=120, y=20),
            DesktopItem(id="2", label="b", x=20, y=20),
        ]
        assert moved_count(before, after) == 1
