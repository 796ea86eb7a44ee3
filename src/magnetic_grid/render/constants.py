"""Render constants used across render modules.

Centralizes magic numbers from svg.py and animate.py.
Theme-dependent values remain in style.py.
"""

# ---------------------------------------------------------------------------
# Canvas
# ---------------------------------------------------------------------------
CANVAS_PADDING: float = 20.0
"""Padding around the grid area."""

TITLE_HEIGHT: float = 36.0
"""Vertical space reserved above the grid when a title is drawn."""

DEFAULT_CONTAINER_WIDTH: float = 600.0
"""Grid width in pixels when the layout file does not specify one."""

# ---------------------------------------------------------------------------
# Grid guides
# ---------------------------------------------------------------------------
GRID_DASH: str = "4,4"
"""Dash pattern of the column guide lines."""

GRID_LINE_WIDTH: float = 1.0
"""Stroke width of the column and row guide lines."""

# ---------------------------------------------------------------------------
# Field boxes
# ---------------------------------------------------------------------------
LABEL_INSET: float = 10.0
"""Horizontal inset of the field id from the left edge of its box."""

LABEL_Y_RATIO: float = 0.4
"""Vertical position of the field id as a fraction of the box height."""

CAPTION_Y_RATIO: float = 0.72
"""Vertical position of the column caption as a fraction of the box height."""

# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------
PREVIEW_DURATION: float = 0.15
"""Seconds for a preview layout to settle while dragging."""

COMMIT_DURATION: float = 0.3
"""Seconds for the committed, compacted layout to settle."""
