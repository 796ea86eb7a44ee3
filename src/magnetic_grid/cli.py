"""CLI for magnetic-grid."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from magnetic_grid import __version__
from magnetic_grid.layout import compact, compute_preview
from magnetic_grid.layout.collision import find_overlaps, group_by_row, row_gaps
from magnetic_grid.layout.constants import MAGNETIC_WIDTHS, MAX_ROWS
from magnetic_grid.layout.grid import grid_cell, row_index
from magnetic_grid.parser import LayoutDocument, dump_layout_json, parse_layout_document
from magnetic_grid.render import render_svg, render_transition
from magnetic_grid.render.constants import DEFAULT_CONTAINER_WIDTH, PREVIEW_DURATION
from magnetic_grid.themes import THEMES


def setup_logging(verbose: bool = False) -> None:
    logger = logging.getLogger("magnetic_grid")
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers if this is called multiple times
    logger.handlers.clear()
    logger.propagate = False

    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)


def _load(input_file: Path) -> LayoutDocument:
    try:
        return parse_layout_document(input_file.read_text())
    except ValueError as e:
        click.echo(f"Parse error: {e}", err=True)
        raise SystemExit(1)


def _is_magnetic(width: float) -> bool:
    return any(abs(width - w) < 1e-9 for w in MAGNETIC_WIDTHS)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log engine decisions to stderr")
def cli(verbose: bool) -> None:
    """magnetic-grid: Inspect and rearrange 6-column magnetic grid layouts."""
    setup_logging(verbose)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output SVG file path. Defaults to <input>.svg")
@click.option("--theme", type=click.Choice(list(THEMES.keys())), default="dark",
              help="Visual theme (default: dark)")
@click.option("--container-width", type=float, default=None,
              help="Grid width in pixels (default: from file, else 600)")
@click.option("--no-grid", is_flag=True, help="Do not draw column guides")
@click.option("--highlight", "highlight_id", default=None, metavar="FIELD",
              help="Id of a field to draw in the highlight colors")
def render(
    input_file: Path,
    output: Path | None,
    theme: str,
    container_width: float | None,
    no_grid: bool,
    highlight_id: str | None,
) -> None:
    """Render a layout JSON file to SVG."""
    doc = _load(input_file)
    if highlight_id is not None and highlight_id not in doc.layout:
        click.echo(f"Unknown field '{highlight_id}'", err=True)
        raise SystemExit(1)
    width = container_width or doc.container_width or DEFAULT_CONTAINER_WIDTH

    svg = render_svg(doc.layout, THEMES[theme], container_width=width,
                     title=doc.title, show_grid=not no_grid,
                     highlight_id=highlight_id)

    if output is None:
        output = input_file.with_suffix(".svg")

    output.write_text(svg)
    rows = len(group_by_row(doc.layout))
    click.echo(f"Rendered {len(doc.layout)} fields, {rows} rows -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
def validate(input_file: Path) -> None:
    """Check a layout for overlaps, non-magnetic widths and out-of-bounds fields."""
    doc = _load(input_file)

    errors = []
    warnings = []

    for a, b in find_overlaps(doc.layout):
        errors.append(f"Fields '{a}' and '{b}' overlap in row "
                      f"{row_index(doc.layout[a].y)}")

    for placement in doc.layout.values():
        if not placement.is_visible:
            continue
        if not _is_magnetic(placement.width):
            errors.append(f"Field '{placement.id}' has non-magnetic width "
                          f"{placement.width:.4f}")
        if placement.x + placement.width > 1.0 + 1e-9:
            errors.append(f"Field '{placement.id}' extends past the right edge "
                          f"(x={placement.x:.4f}, width={placement.width:.4f})")
        row = row_index(placement.y)
        if row >= MAX_ROWS:
            warnings.append(f"Field '{placement.id}' is in row {row}, "
                            f"below the {MAX_ROWS}-row grid")

    for warning in warnings:
        click.echo(f"Warning: {warning}", err=True)

    if errors:
        click.echo("Validation errors:", err=True)
        for err in errors:
            click.echo(f"  - {err}", err=True)
        raise SystemExit(1)

    visible = sum(1 for p in doc.layout.values() if p.is_visible)
    click.echo(f"Valid: {len(doc.layout)} fields "
               f"({visible} visible), {len(group_by_row(doc.layout))} rows")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
def info(input_file: Path) -> None:
    """Show row occupancy of a layout."""
    doc = _load(input_file)
    rows = group_by_row(doc.layout)
    hidden = [fid for fid, p in doc.layout.items() if not p.is_visible]

    click.echo(f"Title: {doc.title or '(none)'}")
    click.echo(f"Fields: {len(doc.layout)}")
    click.echo(f"Rows: {len(rows)}")
    for row, members in sorted(rows.items()):
        cells = ", ".join(
            f"{p.id} [{grid_cell(p).start_column + 1}-{grid_cell(p).end_column + 1}]"
            for p in members
        )
        gaps = row_gaps(row, doc.layout)
        free = ""
        if gaps:
            free = " (free: " + ", ".join(
                f"{g.start + 1}-{g.end + 1}" for g in gaps
            ) + ")"
        click.echo(f"  Row {row}: {cells}{free}")
    click.echo(f"Hidden: {', '.join(hidden) if hidden else '(none)'}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("--field", "field_id", required=True, help="Id of the dragged field")
@click.option("--row", "target_row", type=click.IntRange(0, MAX_ROWS - 1), required=True,
              help="Row the field is dropped on")
@click.option("--commit", is_flag=True, help="Compact the preview as a drop would")
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Write the resulting layout JSON here")
@click.option("--svg", "svg_output", type=click.Path(path_type=Path), default=None,
              help="Write an animated SVG of the transition here")
@click.option("--theme", type=click.Choice(list(THEMES.keys())), default="dark",
              help="Visual theme for --svg (default: dark)")
def preview(
    input_file: Path,
    field_id: str,
    target_row: int,
    commit: bool,
    output: Path | None,
    svg_output: Path | None,
    theme: str,
) -> None:
    """Show where a dragged field would land on a row."""
    doc = _load(input_file)
    placement = doc.layout.get(field_id)
    if placement is None:
        click.echo(f"Unknown field '{field_id}'", err=True)
        raise SystemExit(1)
    if not placement.is_visible:
        click.echo(f"Field '{field_id}' is hidden", err=True)
        raise SystemExit(1)

    result = compute_preview(target_row, field_id, doc.layout)
    layout = compact(result.layout) if commit else result.layout

    click.echo(f"Strategy: {result.info.strategy.value}")
    click.echo(f"Message: {result.info.message}")
    click.echo(f"{field_id}: {grid_cell(layout[field_id]).describe()}")

    if output is not None:
        output.write_text(dump_layout_json(layout, doc.title, doc.container_width))
        click.echo(f"Wrote layout -> {output}")

    if svg_output is not None:
        width = doc.container_width or DEFAULT_CONTAINER_WIDTH
        svg = render_transition(doc.layout, layout, THEMES[theme], container_width=width,
                                duration=PREVIEW_DURATION, title=doc.title,
                                highlight_id=field_id)
        svg_output.write_text(svg)
        click.echo(f"Wrote transition -> {svg_output}")


@cli.command(name="compact")
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output file path. Defaults to printing the layout")
def compact_command(input_file: Path, output: Path | None) -> None:
    """Reflow empty rows away and fill row gaps."""
    doc = _load(input_file)
    result = compact(doc.layout)
    text = dump_layout_json(result, doc.title, doc.container_width)

    if output is None:
        click.echo(text, nl=False)
        return

    output.write_text(text)
    changed = sum(1 for fid, p in result.items() if doc.layout[fid] != p)
    click.echo(f"Compacted {len(result)} fields ({changed} moved), "
               f"{len(group_by_row(result))} rows -> {output}")
