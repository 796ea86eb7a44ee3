"""Layout coordinator: drag sessions, resizing and visibility on one layout.

:class:`GridEngine` owns the authoritative layout and at most one active
:class:`DragSession`. A drag moves through three phases:

- ``BELOW_THRESHOLD``: the pointer is down but has not travelled
  HOVER_THRESHOLD pixels yet; ending here reverts without changes.
- ``PREVIEWING``: every throttled move hit-tests the hovered row and, when
  it differs from the last one, recomputes the preview from the snapshot
  taken at drag start.
- Drag end commits the preview and compacts the layout, or falls back to
  snapping the raw pointer position onto the grid.

All operations are synchronous. Layout transitions are atomic; animating
between two layouts is left to the host (see ``render.animate``).
"""

from __future__ import annotations

__all__ = [
    "DragPhase",
    "DragSession",
    "DragUpdate",
    "EngineState",
    "GridEngine",
]

import logging
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from magnetic_grid.layout.collision import (
    find_next_available_position,
    max_occupied_row,
    would_overlap,
)
from magnetic_grid.layout.compaction import compact, reflow_rows
from magnetic_grid.layout.constants import (
    HOVER_THRESHOLD,
    MAX_ROWS,
    PREVIEW_THROTTLE,
    ROW_HEIGHT,
)
from magnetic_grid.layout.grid import (
    column_of_x,
    is_near_snap_point,
    row_of_y,
    snap_normalized,
)
from magnetic_grid.layout.preview import PreviewInfo, PreviewResult, compute_preview
from magnetic_grid.layout.resize import ResizeController
from magnetic_grid.parser.model import FieldPlacement, Layout, ResizeEdge

logger = logging.getLogger(__name__)

Point = tuple[float, float]


class DragPhase(Enum):
    IDLE = "idle"
    BELOW_THRESHOLD = "below_threshold"
    PREVIEWING = "previewing"


@dataclass
class DragSession:
    """Ephemeral state of one drag gesture."""

    dragged_id: str
    original_layout: Layout
    start_pointer: Point
    start_position: Point
    has_crossed_threshold: bool = False
    preview: PreviewResult | None = None
    target_row: int | None = None
    last_preview_at: float | None = None

    @property
    def phase(self) -> DragPhase:
        if self.has_crossed_threshold:
            return DragPhase.PREVIEWING
        return DragPhase.BELOW_THRESHOLD

    @property
    def preview_layout(self) -> Layout:
        return self.preview.layout if self.preview else {}


@dataclass(frozen=True)
class EngineState:
    """Snapshot of the engine: the authoritative layout plus any drag."""

    layout: Layout
    session: DragSession | None = None

    @property
    def phase(self) -> DragPhase:
        return self.session.phase if self.session else DragPhase.IDLE


@dataclass(frozen=True)
class DragUpdate:
    """What the host should display after a drag move."""

    display_layout: Layout
    hovered_row: int
    hovered_column: int
    preview_info: PreviewInfo | None = None
    # Dragged field is within SNAP_THRESHOLD px of its snapped grid slot
    near_snap_point: bool = False


@dataclass
class GridEngine:
    """Single controller for the drag, resize and visibility operations."""

    clock: Callable[[], float] = time.monotonic
    hover_threshold: float = HOVER_THRESHOLD
    throttle: float = PREVIEW_THROTTLE
    # When False, drops always take the snap-and-relocate path.
    preview_enabled: bool = True
    layout: Layout = field(default_factory=dict)
    session: DragSession | None = None
    resizer: ResizeController = field(default_factory=ResizeController)
    # Position the dragged field is drawn at, following the pointer.
    _drag_position: Point | None = field(default=None, init=False, repr=False)

    @property
    def state(self) -> EngineState:
        return EngineState(layout=self.layout, session=self.session)

    def init_layout(self, defaults: Layout) -> EngineState:
        """Install the initial layout. Keys must match placement ids."""
        for fid, placement in defaults.items():
            if fid != placement.id:
                raise ValueError(f"Layout key '{fid}' does not match placement id "
                                 f"'{placement.id}'")
        self.layout = dict(defaults)
        self.session = None
        self._drag_position = None
        return self.state

    # ------------------------------------------------------------------
    # Drag
    # ------------------------------------------------------------------

    def on_drag_start(self, field_id: str, pointer: Point) -> EngineState:
        """Begin dragging *field_id*; snapshots the layout for revert."""
        placement = self.layout[field_id]
        if not placement.is_visible:
            raise ValueError(f"Cannot drag hidden field '{field_id}'")
        if self.session is not None:
            logger.info("Drag of %s still active, reverting it", self.session.dragged_id)
            self.on_drag_cancel()

        self.session = DragSession(
            dragged_id=field_id,
            original_layout=dict(self.layout),
            start_pointer=pointer,
            start_position=placement.position,
        )
        self._drag_position = placement.position
        logger.debug("Drag start %s at %s", field_id, pointer)
        return self.state

    def on_drag_move(self, pointer: Point, container_width: float) -> DragUpdate:
        """Track the pointer and refresh the preview when the row changes."""
        session = self._require_session()
        dragged = session.original_layout[session.dragged_id]

        dx_px = pointer[0] - session.start_pointer[0]
        dy_px = pointer[1] - session.start_pointer[1]
        if not session.has_crossed_threshold and math.hypot(dx_px, dy_px) > self.hover_threshold:
            session.has_crossed_threshold = True
            logger.debug("Drag %s crossed threshold", session.dragged_id)

        dx = dx_px / container_width if container_width > 0 else 0.0
        x = min(max(session.start_position[0] + dx, 0.0), 1.0 - dragged.width)
        y = min(max(session.start_position[1] + dy_px, 0.0), MAX_ROWS * ROW_HEIGHT)
        self._drag_position = (x, y)

        hovered_row = row_of_y(y)
        hovered_column = column_of_x(x)
        snap_x, snap_y = snap_normalized(x, y)
        near_snap = is_near_snap_point(
            (x * container_width, y), (snap_x * container_width, snap_y)
        )

        if (
            self.preview_enabled
            and session.has_crossed_threshold
            and hovered_row != session.target_row
        ):
            now = self.clock()
            if session.last_preview_at is None or now - session.last_preview_at >= self.throttle:
                session.last_preview_at = now
                session.preview = compute_preview(
                    hovered_row, session.dragged_id, session.original_layout
                )
                session.target_row = hovered_row

        return DragUpdate(
            display_layout=self._display_layout(),
            hovered_row=hovered_row,
            hovered_column=hovered_column,
            preview_info=session.preview.info if session.preview else None,
            near_snap_point=near_snap,
        )

    def on_drag_end(self) -> Layout:
        """Commit the drag and return the new authoritative layout."""
        session = self._require_session()
        position = self._drag_position or session.start_position
        self.session = None
        self._drag_position = None

        if not session.has_crossed_threshold:
            logger.debug("Drag %s ended below threshold, reverting", session.dragged_id)
            self.layout = session.original_layout
            return self.layout

        dropped_row = row_of_y(position[1])
        if self.preview_enabled and dropped_row != session.target_row:
            # The last move may have been throttled; preview the drop row itself
            logger.debug("Drop row %d differs from previewed row %s, recomputing",
                         dropped_row, session.target_row)
            session.preview = compute_preview(
                dropped_row, session.dragged_id, session.original_layout
            )
            session.target_row = dropped_row

        if session.preview is not None and session.preview.info.has_space:
            logger.debug("Committing %s preview for %s",
                         session.preview.info.strategy.value, session.dragged_id)
            self.layout = compact(session.preview.layout)
            return self.layout

        self.layout = self._standard_drop(session, position)
        return self.layout

    def on_drag_cancel(self) -> Layout:
        """Abandon the drag, restoring the snapshot."""
        session = self._require_session()
        self.session = None
        self._drag_position = None
        self.layout = session.original_layout
        return self.layout

    def _standard_drop(self, session: DragSession, position: Point) -> Layout:
        """Snap the raw drop position; relocate if it collides; reflow only."""
        layout = dict(session.original_layout)
        dragged = layout[session.dragged_id]
        x, y = snap_normalized(*position)
        if x + dragged.width > 1.0:
            x = max(0.0, 1.0 - dragged.width)
        if would_overlap(x, y, dragged.width, layout, session.dragged_id):
            x, y = find_next_available_position(
                dragged.width, layout, session.dragged_id, start_row=row_of_y(y)
            )
        layout[session.dragged_id] = dragged.replace(x=x, y=y)
        return reflow_rows(layout)

    def _display_layout(self) -> Layout:
        session = self.session
        base = session.preview.layout if session.preview else session.original_layout
        display = dict(base)
        x, y = self._drag_position
        display[session.dragged_id] = base[session.dragged_id].replace(x=x, y=y)
        return display

    def _require_session(self) -> DragSession:
        if self.session is None:
            raise RuntimeError("No drag in progress")
        return self.session

    # ------------------------------------------------------------------
    # Resize
    # ------------------------------------------------------------------

    def on_resize_start(self, field_id: str) -> None:
        self.resizer.start(field_id, self.layout)

    def on_resize_step(
        self,
        field_id: str,
        edge: ResizeEdge,
        delta: float,
        container_width: float,
    ) -> Layout:
        """Feed handle travel; the layout changes once a full step accumulates.

        Steps that would overlap a row-mate stay with the resizer until
        :meth:`on_resize_end` and never reach :attr:`layout`.
        """
        step = self.resizer.update(field_id, edge, delta, container_width, self.layout)
        self.layout = step.layout
        return self.layout

    def on_resize_end(self, field_id: str) -> Layout:
        self.layout = self.resizer.end(field_id, self.layout)
        return self.layout

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    def on_field_visibility_toggle(self, field_id: str) -> Layout:
        """Hide a visible field (then reflow), or show a hidden one.

        A shown field is appended full width below the last occupied row.
        Unknown ids raise KeyError.
        """
        placement = self.layout[field_id]
        layout = dict(self.layout)
        if placement.is_visible:
            logger.debug("Hiding %s", field_id)
            layout[field_id] = FieldPlacement.hidden(field_id)
            self.layout = reflow_rows(layout)
        else:
            x, y = find_next_available_position(
                1.0, layout, exclude_id=field_id,
                start_row=max_occupied_row(layout) + 1,
            )
            logger.debug("Showing %s at %s", field_id, (x, y))
            layout[field_id] = FieldPlacement(id=field_id, x=x, y=y, width=1.0)
            self.layout = layout
        return self.layout
