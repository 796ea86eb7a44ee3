"""SVG output for layouts and layout transitions."""

from magnetic_grid.render.animate import interpolate_layouts, render_transition
from magnetic_grid.render.svg import render_svg

__all__ = ["interpolate_layouts", "render_svg", "render_transition"]
