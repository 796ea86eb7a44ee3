"""Drag-preview placement strategies.

While a field is dragged over a row, the rest of the layout is rearranged
into a candidate ("preview") layout. Three strategies, tried in order:

1. Auto-resize: the row has a gap wide enough for some magnetic width; the
   dragged field is resized to the widest magnetic width that fits the
   chosen gap and placed at the gap's first column.
2. Direct placement: as above, but the fitting width equals the field's
   current width, so only its position changes.
3. Push-down: the row has no usable gap; the target row and every row
   below it shift down by one and the dragged field takes column 0 of the
   vacated row at its pre-drag width.

Previews are always computed from the layout snapshot taken when the drag
started, so hovering back and forth between rows is idempotent.
"""

from __future__ import annotations

__all__ = [
    "PlacementStrategy",
    "PreviewInfo",
    "PreviewResult",
    "choose_gap",
    "compute_preview",
]

import logging
from dataclasses import dataclass
from enum import Enum

from magnetic_grid.layout.collision import Gap, row_gaps
from magnetic_grid.layout.constants import MAGNETIC_SPANS
from magnetic_grid.layout.grid import (
    column_span_of_width,
    column_to_x,
    row_index,
    row_to_y,
    width_of_span,
)
from magnetic_grid.parser.model import FieldPlacement, Layout

logger = logging.getLogger(__name__)

MIN_SPAN: int = MAGNETIC_SPANS[0]


class PlacementStrategy(Enum):
    AUTO_RESIZE = "auto_resize"
    DIRECT = "direct"
    PUSH_DOWN = "push_down"


@dataclass(frozen=True)
class PreviewInfo:
    """Caller-side feedback describing the preview that was computed."""

    has_space: bool
    strategy: PlacementStrategy
    target_x: float
    target_y: float
    start_column: int
    span: int
    message: str = ""

    @property
    def is_push_down(self) -> bool:
        return self.strategy is PlacementStrategy.PUSH_DOWN

    @property
    def end_column(self) -> int:
        return self.start_column + self.span - 1


@dataclass(frozen=True)
class PreviewResult:
    """A full candidate layout plus its feedback info."""

    target_row: int
    layout: Layout
    info: PreviewInfo


def _fitting_span(gap_span: int) -> int | None:
    """Widest magnetic span that fits in a gap of *gap_span* columns."""
    fitting = [s for s in MAGNETIC_SPANS if s <= gap_span]
    return fitting[-1] if fitting else None


def choose_gap(gaps: list[Gap]) -> Gap | None:
    """Pick the gap a dragged field drops into.

    Only gaps that admit the narrowest magnetic width are usable. Among
    those the widest wins; equally wide gaps resolve to the leftmost.
    """
    usable = [g for g in gaps if g.span >= MIN_SPAN]
    if not usable:
        return None
    return max(usable, key=lambda g: (g.span, -g.start))


def _columns_label(start: int, span: int) -> str:
    # 1-indexed for people
    return f"columns {start + 1}-{start + span}"


def compute_preview(
    target_row: int,
    dragged_id: str,
    original_layout: Layout,
) -> PreviewResult:
    """Compute the preview layout for dropping *dragged_id* onto *target_row*.

    *original_layout* is not modified. The returned layout contains every
    field of the original, hidden ones unchanged.
    """
    dragged = original_layout[dragged_id]
    gap = choose_gap(row_gaps(target_row, original_layout, exclude_id=dragged_id))

    if gap is None:
        return _push_down_preview(target_row, dragged, original_layout)

    span = _fitting_span(gap.span)
    current_span = column_span_of_width(dragged.width)
    x = column_to_x(gap.start)
    y = row_to_y(target_row)

    if span == current_span:
        strategy = PlacementStrategy.DIRECT
        width = dragged.width
        message = f"place at {_columns_label(gap.start, span)}"
    else:
        strategy = PlacementStrategy.AUTO_RESIZE
        width = width_of_span(span)
        verb = "expand" if span > current_span else "shrink"
        message = f"{verb} to {int(width * 100)}% ({_columns_label(gap.start, span)})"

    logger.debug("Preview %s -> row %d: %s", dragged_id, target_row, message)

    preview = dict(original_layout)
    preview[dragged_id] = dragged.replace(x=x, y=y, width=width)
    info = PreviewInfo(
        has_space=True,
        strategy=strategy,
        target_x=x,
        target_y=y,
        start_column=gap.start,
        span=span,
        message=message,
    )
    return PreviewResult(target_row=target_row, layout=preview, info=info)


def _push_down_preview(
    target_row: int,
    dragged: FieldPlacement,
    original_layout: Layout,
) -> PreviewResult:
    """Shift the target row and everything below it down by one row."""
    preview: Layout = {}
    moved = 0
    for fid, placement in original_layout.items():
        if fid == dragged.id or not placement.is_visible:
            preview[fid] = placement
            continue
        row = row_index(placement.y)
        if row >= target_row:
            preview[fid] = placement.replace(y=row_to_y(row + 1))
            moved += 1
        else:
            preview[fid] = placement

    y = row_to_y(target_row)
    preview[dragged.id] = dragged.replace(x=0.0, y=y)
    span = column_span_of_width(dragged.width)

    logger.debug("Preview %s -> row %d: push down %d field(s)",
                 dragged.id, target_row, moved)

    info = PreviewInfo(
        has_space=True,
        strategy=PlacementStrategy.PUSH_DOWN,
        target_x=0.0,
        target_y=y,
        start_column=0,
        span=span,
        message="push other fields down",
    )
    return PreviewResult(target_row=target_row, layout=preview, info=info)
