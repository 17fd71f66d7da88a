"""Tests for the in-memory history store."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import UTC, datetime

from deskctl.domain.history import HistoryStore
from deskctl.domain.models import DesktopItem

MakeItem = Callable[..., DesktopItem]


def _store() -> HistoryStore:
    ids: Iterator[int] = iter(range(1, 100))
    return HistoryStore(
        clock=lambda: datetime(2024, 1, 1, tzinfo=UTC),
        new_id=lambda kind: f"h-{next(ids)}",
    )


class TestHistoryStore:
    def test_most_recent_first(self, make_item: MakeItem) -> None:
        store = _store()
        for title in ("A", "B", "C"):
            store.append([make_item("1", "a")], title)
        assert [e.title for e in store.entries] == ["C", "B", "A"]
        assert len(store) == 3

    def test_rollback_target_ignores_stars(self, make_item: MakeItem) -> None:
        store = _store()
        a = store.append([make_item("1", "a")], "A")
        store.append([make_item("1", "a")], "B")
        store.append([make_item("1", "a")], "C")
        store.toggle_star(a.id)
        target = store.rollback_target()
        assert target is not None
        assert target.title == "C"

    def test_empty_rollback_target(self) -> None:
        assert _store().rollback_target() is None

    def test_toggle_star(self, make_item: MakeItem) -> None:
        store = _store()
        entry = store.append([make_item("1", "a")], "A")
        starred = store.toggle_star(entry.id)
        assert starred is not None and starred.starred
        unstarred = store.toggle_star(entry.id)
        assert unstarred is not None and not unstarred.starred
        assert store.toggle_star("h-missing") is None

    def test_delete_and_get(self, make_item: MakeItem) -> None:
        store = _store()
        entry = store.append([make_item("1", "a")], "A")
        assert store.get(entry.id) == entry
        assert store.delete(entry.id)
        assert not store.delete(entry.id)
        assert store.get(entry.id) is None

    def test_snapshot_is_a_copy(self, make_item: MakeItem) -> None:
        store = _store()
        items = [make_item("1", "a")]
        entry = store.append(items, "A")
        items.append(make_item("2", "b"))
        assert len(entry.items) == 1
        assert entry.time == datetime(2024, 1, 1, tzinfo=UTC)
