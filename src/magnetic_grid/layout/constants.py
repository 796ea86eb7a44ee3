"""Layout constants used across layout modules.

Centralizes the grid geometry and the interaction thresholds shared by
grid.py, collision.py, preview.py, compaction.py, resize.py and engine.py.
"""

# ---------------------------------------------------------------------------
# Grid geometry
# ---------------------------------------------------------------------------
TOTAL_COLUMNS: int = 6
"""Number of columns in the grid."""

MAX_ROWS: int = 12
"""Number of rows a drag can target and the placement scan covers."""

ROW_HEIGHT: float = 70.0
"""Pixel height of one row; converts vertical offsets to row indices."""

SNAP_THRESHOLD: float = 30.0
"""Pixel radius within which a dragged field is considered on a snap point."""

FIELD_GAP: float = 4.0
"""Visual spacing between adjacent fields. Not part of collision math."""

# ---------------------------------------------------------------------------
# Magnetic widths
# ---------------------------------------------------------------------------
MAGNETIC_WIDTHS: tuple[float, ...] = (2 / 6, 3 / 6, 4 / 6, 6 / 6)
"""Allowed field widths, ordered from narrowest to widest."""

MAGNETIC_SPANS: tuple[int, ...] = (2, 3, 4, 6)
"""Column spans of MAGNETIC_WIDTHS, in the same order."""

SPAN_EPSILON: float = 0.001
"""Tolerance of the width -> column span breakpoint table."""

# ---------------------------------------------------------------------------
# Interaction thresholds
# ---------------------------------------------------------------------------
HOVER_THRESHOLD: float = 40.0
"""Pointer travel (px) that turns a press into a drag."""

PREVIEW_THROTTLE: float = 0.1
"""Minimum seconds between two preview recomputations during a drag."""

RESIZE_STEP_FRACTION: float = 0.1
"""Accumulated handle travel, as a fraction of container width, per resize step."""

SIGNIFICANT_GAP: float = 0.05
"""Free row width below which gap-fill leaves a row alone."""

WIDTH_CHANGE_THRESHOLD: float = 0.01
"""Width differences below this are not worth applying."""

BOUNDS_EPSILON: float = 1e-9
"""Float slack for the x >= 0 and x + width <= 1 bounds checks."""
