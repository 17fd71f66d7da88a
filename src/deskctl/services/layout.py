"""LayoutService: direct placement operations outside the rule engine."""

from __future__ import annotations

import random

from deskctl.domain.actions import sort_key
from deskctl.domain.grid import place, resolve_nearest, shuffle
from deskctl.domain.types import SortField
from deskctl.services._helpers import item_payload, moved_count
from deskctl.services.base import BaseService
from deskctl.services.result import NOT_FOUND, ServiceResult
from deskctl.services.telemetry import traced


class LayoutService(BaseService):
    """Grid layout, shuffle and collision-resolved moves.

    None of these write history; only rule application does.
    """

    @traced
    def list_items(self) -> ServiceResult:
        op = "list_items"
        with self._workspace.session() as unit:
            if failure := self._no_session(op, unit):
                return failure
            items = unit.state.items
        return ServiceResult(
            ok=True,
            op=op,
            data={"source": unit.state.source, "count": len(items), "items": item_payload(items)},
        )

    @traced
    def organize(self) -> ServiceResult:
        """Re-lay every item onto the grid in its current order."""
        return self._relayout("organize", sort_by_name=False)

    @traced
    def sort_by_name(self) -> ServiceResult:
        """Lay items onto the grid in name order."""
        return self._relayout("sort_by_name", sort_by_name=True)

    def _relayout(self, op: str, *, sort_by_name: bool) -> ServiceResult:
        with self._workspace.session() as unit:
            if failure := self._no_session(op, unit):
                return failure
            before = unit.state.items
            ordered = sorted(before, key=sort_key(SortField.NAME)) if sort_by_name else before
            after = place(ordered, self._workspace.canvas, self._workspace.grid)
            unit.replace(unit.state.model_copy(update={"items": after}))
        return ServiceResult(
            ok=True,
            op=op,
            data={"moved": moved_count(before, after), "count": len(after),
                  "items": item_payload(after)},
        )

    @traced
    def shuffle(self, *, seed: int | None = None) -> ServiceResult:
        """Scatter items over random cells of the visible desktop.

        With more items than cells, the excess keep their position and a
        warning is returned.
        """
        op = "shuffle"
        settings = self._workspace.settings
        max_width = settings.canvas.width
        max_height = settings.canvas.height - settings.canvas.taskbar_height
        with self._workspace.session() as unit:
            if failure := self._no_session(op, unit):
                return failure
            before = unit.state.items
            after = shuffle(before, max_width, max_height, self._workspace.grid, random.Random(seed))
            unit.replace(unit.state.model_copy(update={"items": after}))

        grid = self._workspace.grid
        capacity = ((max_width - grid.offset_x) // grid.pitch_x) * (
            (max_height - grid.offset_y) // grid.pitch_y
        )
        warnings: list[str] = []
        if len(before) > capacity:
            warnings.append(
                f"{len(before) - capacity} item(s) did not fit on the desktop and kept their position"
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"seed": seed, "moved": moved_count(before, after), "count": len(after),
                  "items": item_payload(after)},
            warnings=warnings,
        )

    @traced
    def move(self, item_id: str, x: float, y: float) -> ServiceResult:
        """Drop an item at ``(x, y)``, snapped to the nearest free grid cell."""
        op = "move_item"
        with self._workspace.session() as unit:
            if failure := self._no_session(op, unit):
                return failure
            items = unit.state.items
            item = unit.state.find_item(item_id)
            if item is None:
                return ServiceResult.failure(op, NOT_FOUND, f"No item with id {item_id}")

            cell = resolve_nearest(
                x, y, item_id, items, self._workspace.canvas, self._workspace.grid
            )
            moved = item.moved_to(*cell)
            unit.replace(
                unit.state.model_copy(
                    update={"items": [moved if i.id == item_id else i for i in items]}
                )
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": item_id,
                "label": item.label,
                "from": list(item.position),
                "to": list(moved.position),
                "requested": [x, y],
            },
        )
