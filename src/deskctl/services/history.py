"""HistoryService: inspect and restore desktop snapshots."""

from __future__ import annotations

from deskctl.services._helpers import item_payload
from deskctl.services.base import BaseService
from deskctl.services.result import EMPTY_HISTORY, NOT_FOUND, ServiceResult
from deskctl.services.telemetry import traced


class HistoryService(BaseService):
    """History entries are written by rule application; this service reads,
    stars, deletes and rolls back to them."""

    @traced
    def list(self) -> ServiceResult:
        with self._workspace.session() as unit:
            entries = unit.state.history
        return ServiceResult(
            ok=True,
            op="list_history",
            data={
                "count": len(entries),
                "entries": [
                    {
                        "id": e.id,
                        "time": e.time.isoformat(),
                        "title": e.title,
                        "starred": e.starred,
                        "items": len(e.items),
                    }
                    for e in entries
                ],
            },
        )

    @traced
    def rollback(self, entry_id: str | None = None) -> ServiceResult:
        """Restore the desktop from *entry_id*, or from the most recent entry."""
        op = "rollback"
        warnings: list[str] = []
        with self._workspace.session() as unit:
            store = unit.state.history_store()
            if entry_id is None:
                entry = store.rollback_target()
                if entry is None:
                    return ServiceResult.failure(op, EMPTY_HISTORY, "History is empty")
            else:
                entry = store.get(entry_id)
                if entry is None:
                    return ServiceResult.failure(op, NOT_FOUND, f"No history entry with id {entry_id}")

            unit.replace(
                unit.state.model_copy(update={"items": entry.items, "last_applied": entry.items})
            )

        self._dispatch_event("post_rollback", {"entry_id": entry.id, "title": entry.title}, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": entry.id,
                "title": entry.title,
                "count": len(entry.items),
                "items": item_payload(entry.items),
            },
            warnings=warnings,
        )

    @traced
    def toggle_star(self, entry_id: str) -> ServiceResult:
        op = "star_history"
        with self._workspace.session() as unit:
            store = unit.state.history_store()
            entry = store.toggle_star(entry_id)
            if entry is None:
                return ServiceResult.failure(op, NOT_FOUND, f"No history entry with id {entry_id}")
            unit.replace(unit.state.with_history(store))
        return ServiceResult(ok=True, op=op, data={"id": entry.id, "starred": entry.starred})

    @traced
    def delete(self, entry_id: str) -> ServiceResult:
        op = "delete_history"
        with self._workspace.session() as unit:
            store = unit.state.history_store()
            if not store.delete(entry_id):
                return ServiceResult.failure(op, NOT_FOUND, f"No history entry with id {entry_id}")
            unit.replace(unit.state.with_history(store))
        return ServiceResult(ok=True, op=op, data={"id": entry_id, "remaining": len(store)})
