"""Discrete-step width resizing from a field's edge handles.

Horizontal handle travel is accumulated; each time it reaches
``RESIZE_STEP_FRACTION`` of the container width the field moves one step
along MAGNETIC_WIDTHS. The right handle keeps the left edge fixed, the
left handle keeps the right edge fixed. Steps that would leave the row
are rejected.

A step that would overlap a row-mate is shown for the gesture only; the
layout keeps the last non-overlapping width, and :meth:`ResizeController.end`
snaps the held step back to the widest width that fits.
"""

from __future__ import annotations

__all__ = ["ResizeController", "ResizeStep", "step_width"]

import logging
from dataclasses import dataclass

from magnetic_grid.layout.collision import would_overlap
from magnetic_grid.layout.constants import (
    BOUNDS_EPSILON,
    MAGNETIC_WIDTHS,
    RESIZE_STEP_FRACTION,
    TOTAL_COLUMNS,
)
from magnetic_grid.layout.grid import column_to_x, magnetic_width
from magnetic_grid.parser.model import FieldPlacement, Layout, ResizeEdge

logger = logging.getLogger(__name__)


def _width_index(width: float) -> int:
    return MAGNETIC_WIDTHS.index(magnetic_width(width))


def _anchored(placement: FieldPlacement, edge: ResizeEdge, width: float) -> FieldPlacement:
    """Placement resized to *width* keeping the edge opposite *edge* fixed."""
    if edge is ResizeEdge.RIGHT:
        return placement.replace(width=width)
    new_x = placement.x + placement.width - width
    # Keep x on a column boundary
    new_x = column_to_x(round(new_x * TOTAL_COLUMNS))
    return placement.replace(x=new_x, width=width)


def _in_bounds(placement: FieldPlacement) -> bool:
    return (
        placement.x >= -BOUNDS_EPSILON
        and placement.x + placement.width <= 1.0 + BOUNDS_EPSILON
    )


def step_width(
    placement: FieldPlacement, edge: ResizeEdge, grow: bool
) -> FieldPlacement | None:
    """One magnetic-width step in either direction, or None if not possible.

    Returns None at either end of MAGNETIC_WIDTHS and when the result would
    cross the left or right edge of the row.
    """
    index = _width_index(placement.width) + (1 if grow else -1)
    if not 0 <= index < len(MAGNETIC_WIDTHS):
        return None
    candidate = _anchored(placement, edge, MAGNETIC_WIDTHS[index])
    if not _in_bounds(candidate):
        return None
    return candidate


@dataclass(frozen=True)
class ResizeStep:
    """Outcome of one handle update.

    ``layout`` is the authoritative layout and never holds an overlap.
    ``placement`` is the field as the gesture currently shows it, which may
    overlap a row-mate until the handle is released. ``accepted`` is True
    when that width changed; hosts use it to trigger haptic or visual
    feedback.
    """

    layout: Layout
    accepted: bool
    placement: FieldPlacement | None = None


class ResizeController:
    """Accumulates handle travel for a single resize gesture."""

    def __init__(self, step_fraction: float = RESIZE_STEP_FRACTION) -> None:
        self.step_fraction = step_fraction
        self.accumulated = 0.0
        self._field_id: str | None = None
        self._edge: ResizeEdge | None = None
        self._original: FieldPlacement | None = None
        self._candidate: FieldPlacement | None = None

    @property
    def active_field(self) -> str | None:
        return self._field_id

    def start(self, field_id: str, layout: Layout) -> None:
        """Remember the field's placement so the gesture can be undone."""
        self._field_id = field_id
        self._edge = None
        self._original = layout[field_id]
        self._candidate = None
        self.accumulated = 0.0

    def update(
        self,
        field_id: str,
        edge: ResizeEdge,
        delta: float,
        container_width: float,
        layout: Layout,
    ) -> ResizeStep:
        """Feed a horizontal pointer delta (px) from an edge handle.

        A step that overlaps a row-mate is kept as the gesture's candidate
        but not written to the returned layout.
        """
        if self._field_id != field_id:
            self.start(field_id, layout)
        self._edge = edge
        current = self._candidate or layout[field_id]

        self.accumulated += delta
        if abs(self.accumulated) < container_width * self.step_fraction:
            return ResizeStep(layout=layout, accepted=False, placement=current)

        # Right handle grows when dragged right, left handle when dragged left.
        moving_right = self.accumulated > 0
        grow = moving_right if edge is ResizeEdge.RIGHT else not moving_right
        self.accumulated = 0.0

        candidate = step_width(current, edge, grow)
        if candidate is None:
            logger.debug("Resize %s (%s, %s) rejected at width %.3f",
                         field_id, edge.value, "grow" if grow else "shrink",
                         current.width)
            return ResizeStep(layout=layout, accepted=False, placement=current)

        logger.debug("Resize %s: width %.3f -> %.3f, x %.3f -> %.3f",
                     field_id, current.width, candidate.width, current.x, candidate.x)
        self._candidate = candidate
        if would_overlap(candidate.x, candidate.y, candidate.width, layout, field_id):
            logger.debug("Resize %s overlaps a row-mate, held until release", field_id)
            return ResizeStep(layout=layout, accepted=True, placement=candidate)

        updated = dict(layout)
        updated[field_id] = candidate
        return ResizeStep(layout=updated, accepted=True, placement=candidate)

    def end(self, field_id: str, layout: Layout) -> Layout:
        """Finish the gesture, snapping back if the field overlaps a row-mate."""
        edge = self._edge or ResizeEdge.RIGHT
        active = self._field_id == field_id
        original = self._original if active else None
        candidate = self._candidate if active else None
        self._field_id = None
        self._edge = None
        self._original = None
        self._candidate = None
        self.accumulated = 0.0

        current = candidate or layout[field_id]
        updated = dict(layout)
        if not would_overlap(current.x, current.y, current.width, layout, field_id):
            updated[field_id] = current
            return updated

        for index in range(_width_index(current.width) - 1, -1, -1):
            candidate = _anchored(current, edge, MAGNETIC_WIDTHS[index])
            if _in_bounds(candidate) and not would_overlap(
                candidate.x, candidate.y, candidate.width, layout, field_id
            ):
                logger.info("Resize %s snapped back to width %.3f",
                            field_id, candidate.width)
                updated[field_id] = candidate
                return updated

        if original is not None:
            logger.info("Resize %s has no fitting width, reverting", field_id)
            updated[field_id] = original
        return updated
