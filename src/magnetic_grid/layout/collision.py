"""Collision detection and free-space search on the grid.

Everything that decides whether two placements conflict goes through
:func:`would_overlap`: two visible placements conflict when they share a
row and their column ranges intersect.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import NamedTuple

from magnetic_grid.layout.constants import MAX_ROWS, TOTAL_COLUMNS
from magnetic_grid.layout.grid import (
    actual_span,
    column_of_x,
    column_span_of_width,
    column_to_x,
    grid_cell,
    row_index,
    row_to_y,
)
from magnetic_grid.parser.model import FieldPlacement, Layout, visible_fields

logger = logging.getLogger(__name__)


class Gap(NamedTuple):
    """A maximal run of free columns within one row."""

    start: int
    span: int

    @property
    def end(self) -> int:
        return self.start + self.span - 1

    @property
    def center(self) -> float:
        """Center of the gap as a fraction of the row width."""
        return (self.start + self.span / 2) / TOTAL_COLUMNS


def _ranges_intersect(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return not (a_end < b_start or a_start > b_end)


def would_overlap(
    x: float,
    y: float,
    width: float,
    layout: Layout,
    exclude_id: str | None = None,
) -> bool:
    """Check whether a candidate placement collides with any row-mate.

    The candidate occupies row ``row_index(y)`` and columns
    ``[start, start + actual_span - 1]``. Placements that are hidden or
    whose id equals *exclude_id* are ignored.
    """
    row = row_index(y)
    start = column_of_x(x)
    end = start + actual_span(width, start) - 1

    for other in visible_fields(layout, exclude_id):
        cell = grid_cell(other)
        if cell.row != row:
            continue
        if _ranges_intersect(start, end, cell.start_column, cell.end_column):
            return True
    return False


def fields_in_row(
    row: int, layout: Layout, exclude_id: str | None = None
) -> list[FieldPlacement]:
    """Visible placements in *row*, sorted by start column."""
    members = [p for p in visible_fields(layout, exclude_id) if row_index(p.y) == row]
    members.sort(key=lambda p: column_of_x(p.x))
    return members


def group_by_row(
    layout: Layout, exclude_id: str | None = None
) -> dict[int, list[FieldPlacement]]:
    """Visible placements grouped by row, each row sorted by start column."""
    rows: dict[int, list[FieldPlacement]] = defaultdict(list)
    for placement in visible_fields(layout, exclude_id):
        rows[row_index(placement.y)].append(placement)
    for members in rows.values():
        members.sort(key=lambda p: column_of_x(p.x))
    return dict(rows)


def max_occupied_row(layout: Layout) -> int:
    """Highest row holding a visible placement, or -1 for an empty layout."""
    rows = [row_index(p.y) for p in visible_fields(layout)]
    return max(rows) if rows else -1


def occupied_columns(
    row: int, layout: Layout, exclude_id: str | None = None
) -> set[int]:
    columns: set[int] = set()
    for placement in fields_in_row(row, layout, exclude_id):
        cell = grid_cell(placement)
        columns.update(range(cell.start_column, cell.end_column + 1))
    return columns


def row_gaps(row: int, layout: Layout, exclude_id: str | None = None) -> list[Gap]:
    """Free column runs of a row, left to right.

    An empty row has a single gap spanning every column.
    """
    occupied = occupied_columns(row, layout, exclude_id)
    gaps: list[Gap] = []
    run_start: int | None = None
    for column in range(TOTAL_COLUMNS):
        if column in occupied:
            if run_start is not None:
                gaps.append(Gap(run_start, column - run_start))
                run_start = None
        elif run_start is None:
            run_start = column
    if run_start is not None:
        gaps.append(Gap(run_start, TOTAL_COLUMNS - run_start))
    return gaps


def find_position_in_row(
    row: int,
    width: float,
    layout: Layout,
    exclude_id: str | None = None,
) -> tuple[float, float] | None:
    """Leftmost non-overlapping position for *width* in *row*, if any."""
    span = column_span_of_width(width)
    y = row_to_y(row)
    for start in range(TOTAL_COLUMNS - span + 1):
        x = column_to_x(start)
        if not would_overlap(x, y, width, layout, exclude_id):
            return (x, y)
    return None


def find_next_available_position(
    width: float,
    layout: Layout,
    exclude_id: str | None = None,
    start_row: int = 0,
) -> tuple[float, float]:
    """Row-major scan for the first free slot that fits *width*.

    Scans rows ``start_row .. MAX_ROWS - 1``. When every row is taken the
    field is appended in a new row below all visible placements, so this
    never fails.
    """
    for row in range(max(start_row, 0), MAX_ROWS):
        position = find_position_in_row(row, width, layout, exclude_id)
        if position is not None:
            return position

    others = {fid: p for fid, p in layout.items() if fid != exclude_id}
    bottom = max_occupied_row(others) + 1
    logger.info("No free slot for width %.3f in rows %d-%d, appending at row %d",
                width, start_row, MAX_ROWS - 1, bottom)
    return (0.0, row_to_y(bottom))


def find_overlaps(layout: Layout) -> list[tuple[str, str]]:
    """All pairs of visible placements that overlap, in layout order."""
    pairs: list[tuple[str, str]] = []
    fields = visible_fields(layout)
    for i, a in enumerate(fields):
        for b in fields[i + 1:]:
            if would_overlap(a.x, a.y, a.width, {b.id: b}):
                pairs.append((a.id, b.id))
    return pairs
