"""magnetic-grid: drag-and-drop placement engine for width-discretized grid layouts."""

__version__ = "0.3.0"
