"""Theme and style constants for grid rendering."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Theme:
    """Visual theme for a rendered grid."""

    name: str
    background_color: str
    grid_line_color: str
    field_fill: str
    field_stroke: str
    field_stroke_width: float
    field_corner_radius: float
    label_color: str
    label_font_family: str
    label_font_size: float
    caption_color: str
    caption_font_size: float
    title_color: str
    title_font_size: float
    # Field drawn on top of a preview or transition
    highlight_fill: str = ""  # empty = inherit field_fill
    highlight_stroke: str = "#f5a623"
