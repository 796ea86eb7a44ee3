"""Data model for magnetic grid layouts."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

HIDDEN_SENTINEL: float = -100.0
"""Coordinate used for both axes of a hidden placement."""


class Visibility(Enum):
    """Whether a placement takes part in grid computations."""

    VISIBLE = "visible"
    HIDDEN = "hidden"


class ResizeEdge(Enum):
    """Edge handle of a field that is being dragged to resize it."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class FieldPlacement:
    """A positioned, width-discretized field on the grid.

    ``x`` and ``width`` are fractions of the container width. ``y`` is a
    row-derived vertical offset (``row * ROW_HEIGHT``); the row index, not the
    pixel value, is what the engine reasons about.

    Placements are immutable: every engine operation produces new instances
    via :meth:`replace`, so a snapshot of a layout dict is a full snapshot.
    """

    id: str
    x: float = 0.0
    y: float = 0.0
    width: float = 1.0

    @classmethod
    def hidden(cls, field_id: str) -> FieldPlacement:
        return cls(id=field_id, x=HIDDEN_SENTINEL, y=HIDDEN_SENTINEL, width=0.0)

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    @property
    def visibility(self) -> Visibility:
        if self.width > 0 and self.x >= 0 and self.y >= 0:
            return Visibility.VISIBLE
        return Visibility.HIDDEN

    @property
    def is_visible(self) -> bool:
        return self.visibility is Visibility.VISIBLE

    @property
    def right(self) -> float:
        return self.x + self.width

    def replace(self, **changes) -> FieldPlacement:
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "width": self.width,
            "positionX": self.x,
            "positionY": self.y,
        }

    @classmethod
    def from_dict(cls, data: dict) -> FieldPlacement:
        return cls(
            id=data["id"],
            width=data["width"],
            x=data["positionX"],
            y=data["positionY"],
        )


Layout = dict[str, FieldPlacement]
"""Authoritative layout state: field id -> placement."""


def visible_fields(layout: Layout, exclude_id: str | None = None) -> list[FieldPlacement]:
    """Return the visible placements of a layout, in insertion order."""
    return [
        p for fid, p in layout.items()
        if fid != exclude_id and p.is_visible
    ]
