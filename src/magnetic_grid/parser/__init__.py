"""Layout data model and layout file parsing."""

from magnetic_grid.parser.layout_json import (
    LayoutDocument,
    dump_layout_json,
    parse_layout_document,
    parse_layout_json,
)

__all__ = [
    "LayoutDocument",
    "dump_layout_json",
    "parse_layout_document",
    "parse_layout_json",
]
