"""Layout transitions: tweening between two computed layouts.

The engine switches layouts atomically; hosts animate the visual change
themselves. :func:`interpolate_layouts` gives the intermediate placements
for a progress value, and :func:`render_transition` writes the same
transition as an SVG with SMIL ``<animate>`` elements for inspection.
"""

from __future__ import annotations

__all__ = [
    "ease_in_out",
    "ease_out_cubic",
    "ease_out_quart",
    "interpolate_layouts",
    "render_transition",
]

from typing import Callable
from xml.sax.saxutils import escape

import drawsvg as draw

from magnetic_grid.parser.model import FieldPlacement, Layout
from magnetic_grid.render.constants import (
    COMMIT_DURATION,
    DEFAULT_CONTAINER_WIDTH,
    LABEL_INSET,
    LABEL_Y_RATIO,
)
from magnetic_grid.render.style import Theme
from magnetic_grid.render.svg import FieldBox, field_box, grid_height, new_canvas

Easing = Callable[[float], float]


def ease_out_cubic(t: float) -> float:
    return 1 - (1 - t) ** 3


def ease_out_quart(t: float) -> float:
    return 1 - (1 - t) ** 4


def ease_in_out(t: float) -> float:
    if t < 0.5:
        return 4 * t ** 3
    return 1 - (-2 * t + 2) ** 3 / 2


# SMIL keySplines approximating each easing curve
_KEY_SPLINES: dict[Easing, str] = {
    ease_out_cubic: "0.33 1 0.68 1",
    ease_out_quart: "0.25 1 0.5 1",
    ease_in_out: "0.65 0 0.35 1",
}


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _tween(start: FieldPlacement, end: FieldPlacement, t: float) -> FieldPlacement:
    if t >= 1.0:
        return end
    # Visibility changes switch at the end, never tween from the sentinel
    if start.is_visible != end.is_visible:
        return start
    if not end.is_visible:
        return end
    return end.replace(
        x=_lerp(start.x, end.x, t),
        y=_lerp(start.y, end.y, t),
        width=_lerp(start.width, end.width, t),
    )


def interpolate_layouts(
    start: Layout,
    end: Layout,
    t: float,
    easing: Easing = ease_out_cubic,
) -> Layout:
    """Intermediate layout at progress *t* (clamped to [0, 1]).

    Fields present on one side only are taken from that side unchanged.
    Neither input is modified.
    """
    t = min(max(t, 0.0), 1.0)
    eased = easing(t) if 0.0 < t < 1.0 else t

    result: Layout = {}
    for fid, placement in end.items():
        before = start.get(fid)
        result[fid] = placement if before is None else _tween(before, placement, eased)
    for fid, placement in start.items():
        if fid not in end:
            result[fid] = placement
    return result


def _animate(attribute: str, before: float, after: float, duration: float, splines: str) -> str:
    return (
        f'<animate attributeName="{attribute}" from="{before:.2f}" to="{after:.2f}" '
        f'dur="{duration:.2f}s" calcMode="spline" keyTimes="0;1" '
        f'keySplines="{splines}" fill="freeze"/>'
    )


def _fade(visible_at_end: bool, duration: float) -> str:
    before, after = ("0", "1") if visible_at_end else ("1", "0")
    return (
        f'<animate attributeName="opacity" from="{before}" to="{after}" '
        f'dur="{duration:.2f}s" fill="freeze"/>'
    )


def _moving_field(
    field_id: str,
    before: FieldBox,
    after: FieldBox,
    theme: Theme,
    duration: float,
    splines: str,
    fade: str = "",
    highlighted: bool = False,
) -> str:
    fill = (theme.highlight_fill or theme.field_fill) if highlighted else theme.field_fill
    stroke = theme.highlight_stroke if highlighted else theme.field_stroke
    rect_anims = "".join(
        _animate(attr, a, b, duration, splines)
        for attr, a, b in (
            ("x", before.x, after.x),
            ("y", before.y, after.y),
            ("width", before.width, after.width),
        )
        if abs(a - b) > 0.005
    )
    rect = (
        f'<rect x="{before.x:.2f}" y="{before.y:.2f}" '
        f'width="{before.width:.2f}" height="{before.height:.2f}" '
        f'rx="{theme.field_corner_radius}" ry="{theme.field_corner_radius}" '
        f'fill="{fill}" stroke="{stroke}" '
        f'stroke-width="{theme.field_stroke_width}">{rect_anims}</rect>'
    )

    label_from = (before.x + LABEL_INSET, before.y + before.height * LABEL_Y_RATIO)
    label_to = (after.x + LABEL_INSET, after.y + after.height * LABEL_Y_RATIO)
    text_anims = "".join(
        _animate(attr, a, b, duration, splines)
        for attr, a, b in zip(("x", "y"), label_from, label_to)
        if abs(a - b) > 0.005
    )
    label = (
        f'<text x="{label_from[0]:.2f}" y="{label_from[1]:.2f}" '
        f'font-size="{theme.label_font_size}" font-family="{escape(theme.label_font_family)}" '
        f'font-weight="bold" fill="{theme.label_color}" dominant-baseline="central">'
        f"{escape(field_id)}{text_anims}</text>"
    )
    return f"<g>{fade}{rect}{label}</g>"


def render_transition(
    start: Layout,
    end: Layout,
    theme: Theme,
    container_width: float = DEFAULT_CONTAINER_WIDTH,
    duration: float = COMMIT_DURATION,
    easing: Easing = ease_out_cubic,
    title: str = "",
    highlight_id: str | None = None,
) -> str:
    """SVG in which every field animates from its *start* to its *end* box.

    Fields that appear or disappear fade in place. *highlight_id* marks
    one field, usually the dragged one.
    """
    d, top = new_canvas(theme, container_width, grid_height(start, end), title)
    splines = _KEY_SPLINES.get(easing, _KEY_SPLINES[ease_out_cubic])

    for fid in list(end) + [fid for fid in start if fid not in end]:
        before = start.get(fid)
        after = end.get(fid)
        shown_before = before is not None and before.is_visible
        shown_after = after is not None and after.is_visible
        if not shown_before and not shown_after:
            continue

        if shown_before and shown_after:
            d.append(draw.Raw(_moving_field(
                fid,
                field_box(before, container_width, top),
                field_box(after, container_width, top),
                theme, duration, splines,
                highlighted=fid == highlight_id,
            )))
        else:
            placement = after if shown_after else before
            box = field_box(placement, container_width, top)
            d.append(draw.Raw(_moving_field(
                fid, box, box, theme, duration, splines,
                fade=_fade(shown_after, duration),
                highlighted=fid == highlight_id,
            )))

    return d.as_svg()
