"""Spatial placement engine: grid layout, drag collision, shuffle.

Pure functions over item lists. Every position produced here is a grid
cell: ``x = offset_x + col * pitch_x``, ``y = offset_y + row * pitch_y``.
Cells are walked column-major (down a column, then the next column),
matching how desktop icons fill on screen.
"""

from __future__ import annotations

import heapq
import itertools
import math
import random
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from deskctl.domain.models import DesktopItem, Region

Cell = tuple[int, int]


@dataclass(frozen=True)
class GridSpec:
    """Grid offset, pitch and icon footprint, in reference-canvas pixels."""

    offset_x: int = 20
    offset_y: int = 20
    pitch_x: int = 100
    pitch_y: int = 110
    icon_width: int = 100
    icon_height: int = 110

    def position(self, col: int, row: int) -> Cell:
        """Pixel position of the cell at ``(col, row)``."""
        return (self.offset_x + col * self.pitch_x, self.offset_y + row * self.pitch_y)

    def snap(self, x: float, y: float) -> Cell:
        """Nearest ``(col, row)`` for a pixel position (halves round up)."""
        col = math.floor((x - self.offset_x) / self.pitch_x + 0.5)
        row = math.floor((y - self.offset_y) / self.pitch_y + 0.5)
        return (col, row)


@dataclass(frozen=True)
class Canvas:
    """Visible desktop area. ``reserved_margin`` is kept free at the bottom."""

    width: int = 1920
    height: int = 1080
    reserved_margin: int = 158

    @property
    def max_y(self) -> int:
        return self.height - self.reserved_margin

    def rows(self, grid: GridSpec) -> int:
        """Cells per column: rows whose y does not exceed :attr:`max_y`."""
        if self.max_y < grid.offset_y:
            return 1
        return (self.max_y - grid.offset_y) // grid.pitch_y + 1

    def columns(self, grid: GridSpec) -> int:
        """Columns whose icon footprint fits horizontally."""
        usable = self.width - grid.icon_width - grid.offset_x
        if usable < 0:
            return 1
        return usable // grid.pitch_x + 1


DEFAULT_GRID = GridSpec()
DEFAULT_CANVAS = Canvas()

# Cardinal directions first, then diagonals.
_NEIGHBOURS: tuple[Cell, ...] = (
    (0, -1),
    (0, 1),
    (-1, 0),
    (1, 0),
    (-1, -1),
    (1, -1),
    (-1, 1),
    (1, 1),
)


# ---------------------------------------------------------------------------
# GridPlacer
# ---------------------------------------------------------------------------


def place(
    items: Iterable[DesktopItem],
    canvas: Canvas = DEFAULT_CANVAS,
    grid: GridSpec = DEFAULT_GRID,
) -> list[DesktopItem]:
    """Lay *items* out in order, down each column, wrapping at the canvas bottom."""
    x, y = grid.offset_x, grid.offset_y
    placed: list[DesktopItem] = []
    for item in items:
        placed.append(item.moved_to(x, y))
        y += grid.pitch_y
        if y > canvas.max_y:
            y = grid.offset_y
            x += grid.pitch_x
    return placed


def cells(canvas: Canvas = DEFAULT_CANVAS, grid: GridSpec = DEFAULT_GRID) -> Iterator[Cell]:
    """Yield every cell position on the canvas, column-major."""
    rows = canvas.rows(grid)
    for col in range(canvas.columns(grid)):
        for row in range(rows):
            yield grid.position(col, row)


def free_cells(
    occupied: set[Cell],
    canvas: Canvas = DEFAULT_CANVAS,
    grid: GridSpec = DEFAULT_GRID,
    *,
    region: Region | None = None,
) -> Iterator[Cell]:
    """Yield unoccupied cells, column-major, optionally restricted to *region*.

    A cell belongs to a region only when its full icon footprint fits.
    """
    for cell in cells(canvas, grid):
        if cell in occupied:
            continue
        if region is not None and not region.contains_box(
            cell[0], cell[1], grid.icon_width, grid.icon_height
        ):
            continue
        yield cell


def first_free_cell(
    occupied: set[Cell],
    canvas: Canvas = DEFAULT_CANVAS,
    grid: GridSpec = DEFAULT_GRID,
    *,
    region: Region | None = None,
) -> Cell:
    """First free cell, inside *region* when possible, else anywhere on the canvas.

    Falls back to the top of the column just past the canvas when the
    canvas is full.
    """
    if region is not None:
        inside = next(free_cells(occupied, canvas, grid, region=region), None)
        if inside is not None:
            return inside
    anywhere = next(free_cells(occupied, canvas, grid), None)
    if anywhere is not None:
        return anywhere
    return grid.position(canvas.columns(grid), 0)


# ---------------------------------------------------------------------------
# CollisionResolver
# ---------------------------------------------------------------------------


def resolve_nearest(
    target_x: float,
    target_y: float,
    moving_id: str,
    others: Iterable[DesktopItem],
    canvas: Canvas = DEFAULT_CANVAS,
    grid: GridSpec = DEFAULT_GRID,
) -> Cell:
    """Snap a drag endpoint to the nearest free cell on the canvas.

    The target is snapped to its nearest cell and clamped to the canvas
    grid. If another item already sits there, neighbouring cells are
    explored best-first over the 8-connected neighbourhood, ranked by
    Euclidean distance from the snapped cell, ties broken by discovery
    order. Occupancy is an exact position match. When every cell is
    taken the clamped target is returned.
    """
    occupied = {item.position for item in others if item.id != moving_id}
    last_col, last_row = canvas.columns(grid) - 1, canvas.rows(grid) - 1
    col, row = grid.snap(target_x, target_y)
    col = min(max(col, 0), last_col)
    row = min(max(row, 0), last_row)
    start = grid.position(col, row)
    if start not in occupied:
        return start

    seen: set[Cell] = {(col, row)}
    counter = itertools.count()
    frontier: list[tuple[float, int, int, int]] = []

    def push(c: int, r: int) -> None:
        if not (0 <= c <= last_col and 0 <= r <= last_row) or (c, r) in seen:
            return
        seen.add((c, r))
        distance = math.hypot((c - col) * grid.pitch_x, (r - row) * grid.pitch_y)
        heapq.heappush(frontier, (distance, next(counter), c, r))

    for dc, dr in _NEIGHBOURS:
        push(col + dc, row + dr)

    # Terminates: the canvas grid is finite and each cell is pushed once.
    while frontier:
        _distance, _seq, c, r = heapq.heappop(frontier)
        candidate = grid.position(c, r)
        if candidate not in occupied:
            return candidate
        for dc, dr in _NEIGHBOURS:
            push(c + dc, r + dr)

    return start


# ---------------------------------------------------------------------------
# Shuffler
# ---------------------------------------------------------------------------


def shuffle(
    items: list[DesktopItem],
    max_width: int,
    max_height: int,
    grid: GridSpec = DEFAULT_GRID,
    rng: random.Random | None = None,
) -> list[DesktopItem]:
    """Assign items to randomly permuted cells within ``max_width x max_height``.

    Items beyond the number of available cells keep their position.
    """
    columns = max(0, (max_width - grid.offset_x) // grid.pitch_x)
    rows = max(0, (max_height - grid.offset_y) // grid.pitch_y)
    available = [grid.position(col, row) for row in range(rows) for col in range(columns)]
    # random.shuffle is an in-place Fisher-Yates shuffle.
    (rng or random.Random()).shuffle(available)

    shuffled: list[DesktopItem] = []
    for index, item in enumerate(items):
        if index < len(available):
            shuffled.append(item.moved_to(*available[index]))
        else:
            shuffled.append(item)
    return shuffled
