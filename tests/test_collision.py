"""Tests for collision detection and free-space search."""

import pytest

from magnetic_grid.layout.collision import (
    Gap,
    find_next_available_position,
    find_overlaps,
    group_by_row,
    max_occupied_row,
    occupied_columns,
    row_gaps,
    would_overlap,
)
from magnetic_grid.layout.constants import MAX_ROWS
from magnetic_grid.parser.model import FieldPlacement


def _make_field(fid, row, column, span):
    return FieldPlacement(fid, x=column / 6, y=row * 70.0, width=span / 6)


def _make_layout(*fields):
    return {f.id: f for f in fields}


def test_adjacent_fields_do_not_overlap():
    layout = _make_layout(_make_field("a", 0, 0, 3))
    assert not would_overlap(0.5, 0.0, 2 / 6, layout)


def test_shared_column_overlaps():
    layout = _make_layout(_make_field("a", 0, 0, 3))
    assert would_overlap(2 / 6, 0.0, 2 / 6, layout)


def test_other_rows_never_overlap():
    layout = _make_layout(_make_field("a", 0, 0, 6))
    assert not would_overlap(0.0, 70.0, 1.0, layout)


def test_excluded_field_is_ignored():
    layout = _make_layout(_make_field("a", 0, 0, 6))
    assert not would_overlap(0.0, 0.0, 0.5, layout, exclude_id="a")


def test_hidden_fields_are_ignored():
    layout = _make_layout(FieldPlacement.hidden("h"))
    assert not would_overlap(0.0, 0.0, 1.0, layout)
    assert group_by_row(layout) == {}
    assert max_occupied_row(layout) == -1


def test_row_gaps():
    layout = _make_layout(_make_field("a", 0, 0, 2), _make_field("b", 0, 4, 2))
    assert row_gaps(0, layout) == [Gap(2, 2)]
    assert row_gaps(1, layout) == [Gap(0, 6)]


def test_row_gaps_exclude_dragged_field():
    layout = _make_layout(_make_field("a", 0, 0, 2), _make_field("b", 0, 2, 4))
    assert row_gaps(0, layout) == []
    assert row_gaps(0, layout, exclude_id="b") == [Gap(2, 4)]


def test_gap_center():
    assert Gap(4, 2).center == 5 / 6
    assert Gap(4, 2).end == 5


def test_occupied_columns():
    layout = _make_layout(_make_field("a", 0, 0, 2), _make_field("b", 0, 2, 4))
    assert occupied_columns(0, layout) == {0, 1, 2, 3, 4, 5}
    assert occupied_columns(0, layout, exclude_id="a") == {2, 3, 4, 5}


def test_group_by_row_sorts_by_column():
    layout = _make_layout(
        _make_field("right", 1, 3, 3),
        _make_field("left", 1, 0, 3),
        _make_field("top", 0, 0, 6),
    )
    rows = group_by_row(layout)
    assert [p.id for p in rows[1]] == ["left", "right"]
    assert max_occupied_row(layout) == 1


def test_find_next_available_position_same_row():
    layout = _make_layout(_make_field("a", 0, 0, 3))
    assert find_next_available_position(0.5, layout) == (0.5, 0.0)


def test_find_next_available_position_next_row():
    layout = _make_layout(_make_field("a", 0, 0, 6))
    assert find_next_available_position(0.5, layout) == (0.0, 70.0)


def test_find_next_available_position_from_start_row():
    layout = _make_layout(_make_field("a", 0, 0, 2))
    assert find_next_available_position(0.5, layout, start_row=2) == (0.0, 140.0)


def test_find_next_available_position_falls_back_below_grid():
    """A full grid appends the field in a new row under everything."""
    layout = _make_layout(*[_make_field(f"r{row}", row, 0, 6) for row in range(MAX_ROWS)])
    assert find_next_available_position(0.5, layout) == (0.0, MAX_ROWS * 70.0)


def test_find_overlaps():
    layout = _make_layout(
        _make_field("a", 0, 0, 3),
        _make_field("b", 0, 2, 2),
        _make_field("c", 0, 4, 2),
    )
    assert find_overlaps(layout) == [("a", "b")]


_PAIRS = [
    (_make_field("a", 0, 0, 3), _make_field("b", 0, 3, 3)),
    (_make_field("a", 0, 0, 3), _make_field("b", 0, 2, 2)),
    (_make_field("a", 1, 2, 4), _make_field("b", 1, 0, 2)),
    (_make_field("a", 0, 0, 6), _make_field("b", 1, 0, 6)),
    (_make_field("a", 2, 1, 4), _make_field("b", 2, 4, 2)),
]


@pytest.mark.parametrize("a,b", _PAIRS)
def test_overlap_is_symmetric(a, b):
    layout = _make_layout(a, b)
    assert would_overlap(a.x, a.y, a.width, layout, exclude_id=a.id) == would_overlap(
        b.x, b.y, b.width, layout, exclude_id=b.id
    )


def _full_grid():
    return _make_layout(*[_make_field(f"r{row}", row, 0, 6) for row in range(MAX_ROWS)])


@pytest.mark.parametrize("layout", [
    {},
    _make_layout(_make_field("a", 0, 0, 3)),
    _make_layout(_make_field("a", 0, 0, 2), _make_field("b", 0, 4, 2)),
    _make_layout(_make_field("a", 0, 1, 2), _make_field("b", 1, 0, 6)),
    _make_layout(_make_field("a", 0, 0, 6), FieldPlacement.hidden("h")),
    _full_grid(),
])
@pytest.mark.parametrize("width", [2 / 6, 0.5, 4 / 6, 1.0])
def test_found_position_never_overlaps(layout, width):
    x, y = find_next_available_position(width, layout)
    assert not would_overlap(x, y, width, layout)
    assert x + width <= 1.0 + 1e-9


def test_found_position_ignores_excluded_field():
    layout = _full_grid()
    x, y = find_next_available_position(1.0, layout, exclude_id="r3")
    assert (x, y) == (0.0, 210.0)
    assert not would_overlap(x, y, 1.0, layout, exclude_id="r3")
