#!/usr/bin/env python3
"""Drop every field of the example layouts on every row and render the results.

For each layout in examples/, each visible field is dropped on each row
from 0 to one past the last occupied row. The committed layout is checked
for overlaps and written as an animated transition SVG.

Outputs go to /tmp/magnetic_grid_drops/.

Usage:
    python scripts/render_drops.py [--theme light]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from magnetic_grid.layout import compact, compute_preview  # noqa: E402
from magnetic_grid.layout.collision import find_overlaps, max_occupied_row  # noqa: E402
from magnetic_grid.parser import parse_layout_document  # noqa: E402
from magnetic_grid.render import render_transition  # noqa: E402
from magnetic_grid.render.constants import COMMIT_DURATION, DEFAULT_CONTAINER_WIDTH  # noqa: E402
from magnetic_grid.themes import THEMES  # noqa: E402

OUTPUT_DIR = Path("/tmp/magnetic_grid_drops")
EXAMPLES_DIR = project_root / "examples"


def render_file(layout_path: Path, output_dir: Path, theme_name: str) -> tuple[str, list[str]]:
    """Replay all drops of one layout file.

    Returns (name, list_of_issues).
    """
    name = layout_path.stem
    issues: list[str] = []

    try:
        doc = parse_layout_document(layout_path.read_text())
    except ValueError as e:
        return name, [f"PARSE ERROR: {e}"]

    width = doc.container_width or DEFAULT_CONTAINER_WIDTH
    last_row = max_occupied_row(doc.layout) + 1
    for fid, placement in doc.layout.items():
        if not placement.is_visible:
            continue
        for row in range(last_row + 1):
            result = compute_preview(row, fid, doc.layout)
            committed = compact(result.layout)
            overlaps = find_overlaps(committed)
            if overlaps:
                issues.append(f"OVERLAP ERROR: {fid} -> row {row}: {overlaps}")

            svg = render_transition(doc.layout, committed, THEMES[theme_name],
                                    container_width=width, duration=COMMIT_DURATION,
                                    title=f"{fid} -> row {row}: {result.info.message}")
            (output_dir / f"{name}_{fid}_row{row}.svg").write_text(svg)

    return name, issues


def main():
    parser = argparse.ArgumentParser(description="Render every drop of the example layouts")
    parser.add_argument("--theme", choices=list(THEMES), default="dark", help="Visual theme")
    args = parser.parse_args()

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    all_files = sorted(EXAMPLES_DIR.glob("*.json"))
    print(f"Replaying drops of {len(all_files)} files into {OUTPUT_DIR}/")
    print()

    max_name_len = max(len(f.stem) for f in all_files)
    any_errors = False

    for layout_path in all_files:
        name, issues = render_file(layout_path, OUTPUT_DIR, args.theme)
        status = "OK" if not issues else "FAIL"
        any_errors = any_errors or bool(issues)

        print(f"  {name:<{max_name_len}}  [{status}]")
        for issue in issues:
            print(f"    - {issue}")

    print(f"\nOutputs in: {OUTPUT_DIR}/")

    if any_errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
