"""Magnetic grid placement engine.

Public API:
- GridEngine: drag / resize / visibility controller over one layout
- compute_preview: drag-preview placement strategies
- compact, reflow_rows, fill_gaps: post-commit compaction
- would_overlap, find_next_available_position: collision detection
"""

from magnetic_grid.layout.collision import find_next_available_position, would_overlap
from magnetic_grid.layout.compaction import compact, fill_gaps, reflow_rows
from magnetic_grid.layout.engine import GridEngine
from magnetic_grid.layout.preview import compute_preview

__all__ = [
    "GridEngine",
    "compact",
    "compute_preview",
    "fill_gaps",
    "find_next_available_position",
    "reflow_rows",
    "would_overlap",
]
