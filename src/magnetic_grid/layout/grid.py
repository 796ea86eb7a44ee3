"""Grid coordinate model.

Pure conversions between normalized horizontal positions/widths and column
indices/spans, and between vertical offsets and row indices. Row membership
and column ranges of a placement are always derived here, never stored.
"""

from __future__ import annotations

__all__ = [
    "GridCell",
    "actual_span",
    "column_of_x",
    "column_span_of_width",
    "column_to_x",
    "grid_cell",
    "is_near_snap_point",
    "magnetic_width",
    "row_index",
    "row_of_y",
    "row_to_y",
    "snap_normalized",
    "snap_position",
    "width_of_span",
]

import math
from typing import NamedTuple

from magnetic_grid.layout.constants import (
    MAGNETIC_WIDTHS,
    MAX_ROWS,
    ROW_HEIGHT,
    SNAP_THRESHOLD,
    SPAN_EPSILON,
    TOTAL_COLUMNS,
)
from magnetic_grid.parser.model import FieldPlacement


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def row_of_y(y: float) -> int:
    """Row under a vertical offset, clamped to the grid (pointer hit-test)."""
    return _clamp(round(y / ROW_HEIGHT), 0, MAX_ROWS - 1)


def row_index(y: float) -> int:
    """Row of a stored placement.

    Unlike :func:`row_of_y` this is not clamped: push-down and the
    bottom-of-grid fallback may place fields below ``MAX_ROWS - 1`` and
    those must stay distinct rows.
    """
    return round(y / ROW_HEIGHT)


def row_to_y(row: int) -> float:
    return row * ROW_HEIGHT


def column_of_x(x: float) -> int:
    # Epsilon keeps sums like 1/3 + 1/3 from flooring into the previous column.
    return _clamp(math.floor(x * TOTAL_COLUMNS + SPAN_EPSILON), 0, TOTAL_COLUMNS - 1)


def column_to_x(column: int) -> float:
    return column / TOTAL_COLUMNS


def column_span_of_width(width: float) -> int:
    """Map a width to its column span.

    Breakpoints are evaluated in order with SPAN_EPSILON slack; anything
    wider than 4/6 occupies the whole row.
    """
    if width <= 2 / 6 + SPAN_EPSILON:
        return 2
    if width <= 3 / 6 + SPAN_EPSILON:
        return 3
    if width <= 4 / 6 + SPAN_EPSILON:
        return 4
    return 6


def actual_span(width: float, start_column: int) -> int:
    """Column span truncated at the right edge of the grid."""
    return min(column_span_of_width(width), TOTAL_COLUMNS - start_column)


def width_of_span(span: int) -> float:
    return span / TOTAL_COLUMNS


def magnetic_width(width: float) -> float:
    """Nearest magnetic width; ties go to the narrower one."""
    return min(MAGNETIC_WIDTHS, key=lambda w: abs(width - w))


def snap_normalized(x: float, y: float) -> tuple[float, float]:
    """Snap a normalized x and a pixel y to the nearest column/row boundary."""
    column = _clamp(round(x * TOTAL_COLUMNS), 0, TOTAL_COLUMNS - 1)
    row = row_of_y(y)
    return (column_to_x(column), row_to_y(row))


def snap_position(
    pixel_x: float, pixel_y: float, container_width: float
) -> tuple[float, float]:
    """Snap a pixel position to the grid, returning normalized coordinates."""
    x = pixel_x / container_width if container_width > 0 else 0.0
    return snap_normalized(x, pixel_y)


class GridCell(NamedTuple):
    """Grid footprint of a placement."""

    row: int
    start_column: int
    span: int
    width: float

    @property
    def end_column(self) -> int:
        return self.start_column + self.span - 1

    def describe(self) -> str:
        return (
            f"Row {self.row}, Columns {self.start_column}-{self.end_column}, "
            f"Width {int(self.width * 100)}%"
        )


def grid_cell(placement: FieldPlacement) -> GridCell:
    """Row, start column and (edge-truncated) span of a placement."""
    start = column_of_x(placement.x)
    return GridCell(
        row=row_index(placement.y),
        start_column=start,
        span=actual_span(placement.width, start),
        width=placement.width,
    )


def is_near_snap_point(
    current: tuple[float, float],
    target: tuple[float, float],
    threshold: float = SNAP_THRESHOLD,
) -> bool:
    """True when two pixel points are within *threshold* of each other."""
    return math.hypot(current[0] - target[0], current[1] - target[1]) <= threshold
