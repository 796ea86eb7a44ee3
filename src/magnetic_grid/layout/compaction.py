"""Post-commit compaction: row reflow and gap filling.

Runs once after a preview is committed. Reflow removes empty rows by
renumbering occupied rows consecutively from 0, keeping every column
position. Gap-fill then widens fields so rows do not end up with leftover
horizontal space.
"""

from __future__ import annotations

__all__ = ["compact", "fill_gaps", "reflow_rows"]

import logging

from magnetic_grid.layout.collision import Gap, group_by_row, row_gaps, would_overlap
from magnetic_grid.layout.constants import (
    BOUNDS_EPSILON,
    SIGNIFICANT_GAP,
    TOTAL_COLUMNS,
    WIDTH_CHANGE_THRESHOLD,
)
from magnetic_grid.layout.grid import (
    column_of_x,
    column_to_x,
    grid_cell,
    magnetic_width,
    row_to_y,
)
from magnetic_grid.parser.model import FieldPlacement, Layout

logger = logging.getLogger(__name__)


def reflow_rows(layout: Layout) -> Layout:
    """Renumber occupied rows as 0, 1, 2, ... preserving their order.

    Every visible placement takes part, whatever its column.
    """
    rows = group_by_row(layout)
    result = dict(layout)
    for new_row, old_row in enumerate(sorted(rows)):
        if new_row == old_row:
            continue
        logger.debug("Reflow row %d -> %d (%d field(s))",
                     old_row, new_row, len(rows[old_row]))
        for placement in rows[old_row]:
            result[placement.id] = placement.replace(y=row_to_y(new_row))
    return result


def _is_equal_widths(members: list[FieldPlacement], tolerance: float) -> bool:
    widths = [p.width for p in members]
    average = sum(widths) / len(widths)
    return all(abs(w - average) < tolerance for w in widths)


def _redistribute_equally(row: int, members: list[FieldPlacement]) -> list[FieldPlacement]:
    """Share the full row width equally, packed left to right.

    Shares are whole columns so the result stays on the grid; with a
    column count that does not divide evenly the leftmost fields get the
    extra columns.
    """
    count = len(members)
    base, extra = divmod(TOTAL_COLUMNS, count)
    updated: list[FieldPlacement] = []
    column = 0
    for i, placement in enumerate(members):
        span = base + (1 if i < extra else 0)
        updated.append(placement.replace(
            x=column_to_x(column),
            y=row_to_y(row),
            width=span / TOTAL_COLUMNS,
        ))
        column += span
    return updated


def _nearest_to_gap(gap: Gap, members: list[FieldPlacement]) -> FieldPlacement:
    def distance(p: FieldPlacement) -> float:
        return abs(p.x + p.width / 2 - gap.center)
    return min(members, key=distance)


def _grow_toward_gap(
    row: int,
    members: list[FieldPlacement],
    row_layout: Layout,
) -> FieldPlacement | None:
    """Grow the field closest to the row's largest gap by the gap size.

    The field keeps its left edge when the gap is to its right, and moves
    to the gap's first column when the gap is to its left.
    """
    gaps = row_gaps(row, row_layout)
    if not gaps:
        return None
    largest = max(gaps, key=lambda g: (g.span, -g.start))
    target = _nearest_to_gap(largest, members)

    new_width = magnetic_width(min(target.width + largest.span / TOTAL_COLUMNS, 1.0))
    if abs(new_width - target.width) <= WIDTH_CHANGE_THRESHOLD:
        return None

    new_x = target.x
    if largest.end < column_of_x(target.x):
        # Gap lies to the left; grow leftward from its first column
        new_x = column_to_x(largest.start)
    if new_x + new_width > 1.0 + BOUNDS_EPSILON:
        # Flush to the right edge rather than overflow.
        new_x = max(0.0, 1.0 - new_width)
        new_x = column_to_x(round(new_x * TOTAL_COLUMNS))

    if would_overlap(new_x, target.y, new_width, row_layout, exclude_id=target.id):
        logger.debug("Gap-fill: growing %s to %.3f would overlap, skipped",
                     target.id, new_width)
        return None
    return target.replace(x=new_x, width=new_width)


def fill_gaps(layout: Layout, gap_threshold: float = SIGNIFICANT_GAP) -> Layout:
    """Widen fields into leftover row space.

    Per row with more than *gap_threshold* of free width:

    - a single field is expanded to the full row;
    - fields of equal width (within *gap_threshold*) share the row equally;
    - otherwise the field nearest the largest gap grows by the gap size,
      snapped to a magnetic width.
    """
    result = dict(layout)
    for row, members in sorted(group_by_row(layout).items()):
        occupied = sum(grid_cell(p).span for p in members) / TOTAL_COLUMNS
        free = 1.0 - occupied
        if free <= gap_threshold:
            continue

        if len(members) == 1:
            only = members[0]
            logger.debug("Gap-fill row %d: %s expands to full width", row, only.id)
            result[only.id] = only.replace(x=0.0, width=1.0)
            continue

        if _is_equal_widths(members, gap_threshold):
            logger.debug("Gap-fill row %d: redistributing %d equal fields",
                         row, len(members))
            for placement in _redistribute_equally(row, members):
                result[placement.id] = placement
            continue

        row_layout = {p.id: p for p in members}
        grown = _grow_toward_gap(row, members, row_layout)
        if grown is not None:
            logger.debug("Gap-fill row %d: %s %.3f -> %.3f", row, grown.id,
                         layout[grown.id].width, grown.width)
            result[grown.id] = grown
    return result


def compact(layout: Layout, gap_threshold: float = SIGNIFICANT_GAP) -> Layout:
    """Reflow rows, then fill gaps; one state transition for the caller."""
    return fill_gaps(reflow_rows(layout), gap_threshold=gap_threshold)
