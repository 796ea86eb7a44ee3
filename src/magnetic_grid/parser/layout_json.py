"""Parser and writer for layout JSON files.

Two shapes are accepted:

Bare list of placements::

    [{"id": "name", "width": 0.5, "positionX": 0, "positionY": 0}, ...]

Document object with optional metadata::

    {
      "title": "Contact form",
      "container_width": 600,
      "fields": [{"id": "name", ...}, ...]
    }

Hidden fields are stored with ``width`` 0 at the (-100, -100) sentinel and
are kept as-is.
"""

from __future__ import annotations

__all__ = [
    "LayoutDocument",
    "dump_layout_json",
    "parse_layout_document",
    "parse_layout_json",
]

import json
from dataclasses import dataclass, field

from magnetic_grid.parser.model import FieldPlacement, Layout

_REQUIRED_KEYS = ("id", "width", "positionX", "positionY")
_NUMERIC_KEYS = ("width", "positionX", "positionY")


@dataclass
class LayoutDocument:
    """A parsed layout file."""

    title: str = ""
    container_width: float | None = None
    layout: Layout = field(default_factory=dict)


def _parse_placement(index: int, entry: object) -> FieldPlacement:
    if not isinstance(entry, dict):
        raise ValueError(f"Field #{index} must be an object, got {type(entry).__name__}")

    missing = [key for key in _REQUIRED_KEYS if key not in entry]
    if missing:
        raise ValueError(f"Field #{index} is missing key(s): {', '.join(missing)}")

    if not isinstance(entry["id"], str) or not entry["id"]:
        raise ValueError(f"Field #{index} has an invalid id: {entry['id']!r}")

    for key in _NUMERIC_KEYS:
        value = entry[key]
        # bool is an int subclass but never a valid coordinate
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Field '{entry['id']}': {key} must be a number, got {value!r}")

    placement = FieldPlacement.from_dict(entry)
    return placement.replace(
        x=float(placement.x), y=float(placement.y), width=float(placement.width)
    )


def parse_layout_document(text: str) -> LayoutDocument:
    """Parse layout JSON text into a :class:`LayoutDocument`.

    Raises ValueError for invalid JSON, a wrong top-level shape, missing or
    non-numeric keys, and duplicate field ids.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e

    doc = LayoutDocument()
    if isinstance(data, dict):
        if "fields" not in data:
            raise ValueError("Layout object must have a 'fields' list")
        doc.title = str(data.get("title") or "")
        width = data.get("container_width")
        if width is not None:
            if isinstance(width, bool) or not isinstance(width, (int, float)) or width <= 0:
                raise ValueError(f"container_width must be a positive number, got {width!r}")
            doc.container_width = float(width)
        entries = data["fields"]
    else:
        entries = data

    if not isinstance(entries, list):
        raise ValueError("Layout must be a list of fields or an object with a 'fields' list")

    for index, entry in enumerate(entries):
        placement = _parse_placement(index, entry)
        if placement.id in doc.layout:
            raise ValueError(f"Duplicate field id '{placement.id}'")
        doc.layout[placement.id] = placement

    return doc


def parse_layout_json(text: str) -> Layout:
    """Parse layout JSON text and return only the placements."""
    return parse_layout_document(text).layout


def dump_layout_json(
    layout: Layout,
    title: str = "",
    container_width: float | None = None,
) -> str:
    """Serialize a layout, as a bare list unless metadata is given."""
    fields = [placement.to_dict() for placement in layout.values()]
    if title or container_width is not None:
        data: object = {"title": title, "container_width": container_width, "fields": fields}
    else:
        data = fields
    return json.dumps(data, indent=2) + "\n"
