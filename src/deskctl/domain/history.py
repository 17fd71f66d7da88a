"""Append-only history of item-collection snapshots."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, datetime

from deskctl.domain.ids import generate_id
from deskctl.domain.models import DesktopItem, HistoryEntry


class HistoryStore:
    """Snapshots kept most recent first.

    Entries are only removed by an explicit :meth:`delete`; starring never
    protects or promotes an entry for rollback.
    """

    def __init__(
        self,
        entries: Iterable[HistoryEntry] = (),
        *,
        clock: Callable[[], datetime] | None = None,
        new_id: Callable[[str], str] = generate_id,
    ) -> None:
        self._entries: list[HistoryEntry] = list(entries)
        self._clock = clock or (lambda: datetime.now(UTC))
        self._new_id = new_id

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, items: Sequence[DesktopItem], title: str) -> HistoryEntry:
        entry = HistoryEntry(
            id=self._new_id("history"),
            time=self._clock(),
            title=title,
            items=list(items),
        )
        self._entries.insert(0, entry)
        return entry

    def rollback_target(self) -> HistoryEntry | None:
        """The most recently appended entry, or None when empty."""
        return self._entries[0] if self._entries else None

    def get(self, entry_id: str) -> HistoryEntry | None:
        return next((e for e in self._entries if e.id == entry_id), None)

    def toggle_star(self, entry_id: str) -> HistoryEntry | None:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                updated = entry.model_copy(update={"starred": not entry.starred})
                self._entries[index] = updated
                return updated
        return None

    def delete(self, entry_id: str) -> bool:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != entry_id]
        return len(self._entries) != before
