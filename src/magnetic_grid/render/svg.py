"""SVG snapshots of grid layouts using drawsvg."""

from __future__ import annotations

__all__ = ["FieldBox", "field_box", "grid_height", "new_canvas", "render_svg"]

from typing import NamedTuple

import drawsvg as draw

from magnetic_grid.layout.collision import max_occupied_row
from magnetic_grid.layout.constants import FIELD_GAP, ROW_HEIGHT, TOTAL_COLUMNS
from magnetic_grid.layout.grid import grid_cell
from magnetic_grid.parser.model import FieldPlacement, Layout, visible_fields
from magnetic_grid.render.constants import (
    CANVAS_PADDING,
    CAPTION_Y_RATIO,
    DEFAULT_CONTAINER_WIDTH,
    GRID_DASH,
    GRID_LINE_WIDTH,
    LABEL_INSET,
    LABEL_Y_RATIO,
    TITLE_HEIGHT,
)
from magnetic_grid.render.style import Theme


class FieldBox(NamedTuple):
    """Pixel rectangle of a field inside the canvas."""

    x: float
    y: float
    width: float
    height: float


def field_box(placement: FieldPlacement, container_width: float, top: float) -> FieldBox:
    """Pixel box of a placement, inset by half the field gap on each side."""
    half_gap = FIELD_GAP / 2
    return FieldBox(
        x=CANVAS_PADDING + placement.x * container_width + half_gap,
        y=top + placement.y + half_gap,
        width=max(placement.width * container_width - FIELD_GAP, 0.0),
        height=ROW_HEIGHT - FIELD_GAP,
    )


def grid_height(*layouts: Layout) -> float:
    """Pixel height of the row area tall enough for every layout given."""
    rows = max((max_occupied_row(layout) + 1 for layout in layouts), default=0)
    return max(rows, 1) * ROW_HEIGHT


def new_canvas(
    theme: Theme,
    container_width: float,
    rows_height: float,
    title: str = "",
    show_grid: bool = True,
) -> tuple[draw.Drawing, float]:
    """Create a drawing with background, title and guides.

    Returns the drawing and the y offset of row 0.
    """
    top = CANVAS_PADDING + (TITLE_HEIGHT if title else 0.0)
    svg_width = container_width + CANVAS_PADDING * 2
    svg_height = top + rows_height + CANVAS_PADDING

    d = draw.Drawing(svg_width, svg_height)
    d.append(draw.Rectangle(0, 0, svg_width, svg_height, fill=theme.background_color))

    if title:
        d.append(draw.Text(
            title,
            theme.title_font_size,
            CANVAS_PADDING, CANVAS_PADDING + theme.title_font_size * 0.8,
            fill=theme.title_color,
            font_family=theme.label_font_family,
            font_weight="bold",
        ))

    if show_grid:
        _render_guides(d, theme, container_width, top, rows_height)

    return d, top


def _render_guides(
    d: draw.Drawing,
    theme: Theme,
    container_width: float,
    top: float,
    rows_height: float,
) -> None:
    """Dashed column boundaries and solid row separators."""
    column_width = container_width / TOTAL_COLUMNS
    for column in range(TOTAL_COLUMNS + 1):
        x = CANVAS_PADDING + column * column_width
        d.append(draw.Line(
            x, top, x, top + rows_height,
            stroke=theme.grid_line_color,
            stroke_width=GRID_LINE_WIDTH,
            stroke_dasharray=GRID_DASH,
        ))

    rows = int(round(rows_height / ROW_HEIGHT))
    for row in range(rows + 1):
        y = top + row * ROW_HEIGHT
        d.append(draw.Line(
            CANVAS_PADDING, y, CANVAS_PADDING + container_width, y,
            stroke=theme.grid_line_color,
            stroke_width=GRID_LINE_WIDTH,
        ))


def _columns_caption(placement: FieldPlacement) -> str:
    cell = grid_cell(placement)
    return f"Columns {cell.start_column + 1}-{cell.end_column + 1}"


def _render_field(
    d: draw.Drawing,
    placement: FieldPlacement,
    theme: Theme,
    container_width: float,
    top: float,
    highlighted: bool = False,
) -> None:
    box = field_box(placement, container_width, top)
    fill = (theme.highlight_fill or theme.field_fill) if highlighted else theme.field_fill
    stroke = theme.highlight_stroke if highlighted else theme.field_stroke

    d.append(draw.Rectangle(
        box.x, box.y, box.width, box.height,
        rx=theme.field_corner_radius, ry=theme.field_corner_radius,
        fill=fill,
        stroke=stroke,
        stroke_width=theme.field_stroke_width,
    ))
    d.append(draw.Text(
        placement.id,
        theme.label_font_size,
        box.x + LABEL_INSET, box.y + box.height * LABEL_Y_RATIO,
        fill=theme.label_color,
        font_family=theme.label_font_family,
        font_weight="bold",
        dominant_baseline="central",
    ))
    d.append(draw.Text(
        _columns_caption(placement),
        theme.caption_font_size,
        box.x + LABEL_INSET, box.y + box.height * CAPTION_Y_RATIO,
        fill=theme.caption_color,
        font_family=theme.label_font_family,
        dominant_baseline="central",
    ))


def render_svg(
    layout: Layout,
    theme: Theme,
    container_width: float = DEFAULT_CONTAINER_WIDTH,
    title: str = "",
    show_grid: bool = True,
    highlight_id: str | None = None,
) -> str:
    """Render a layout to an SVG string.

    Hidden fields are not drawn. *highlight_id* marks one field, e.g. the
    dragged field of a preview.
    """
    d, top = new_canvas(theme, container_width, grid_height(layout), title, show_grid)

    for placement in visible_fields(layout):
        _render_field(d, placement, theme, container_width, top,
                      highlighted=placement.id == highlight_id)

    return d.as_svg()
