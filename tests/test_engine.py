"""Tests for the drag, resize and visibility coordinator."""

import pytest

from magnetic_grid.layout.collision import find_overlaps
from magnetic_grid.layout.engine import DragPhase, GridEngine
from magnetic_grid.layout.preview import PlacementStrategy
from magnetic_grid.parser.model import FieldPlacement, ResizeEdge

from layout_validator import errors, validate_layout

CONTAINER = 600.0


class _FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def _make_field(fid, row, column, span):
    return FieldPlacement(fid, x=column / 6, y=row * 70.0, width=span / 6)


def _make_layout(*fields):
    return {f.id: f for f in fields}


def _make_engine(layout, **kwargs):
    clock = _FakeClock()
    engine = GridEngine(clock=clock, **kwargs)
    engine.init_layout(layout)
    return engine, clock


def _make_expand_layout():
    return _make_layout(
        _make_field("field1", 0, 0, 2),
        _make_field("field2", 1, 0, 3),
    )


def test_init_layout_rejects_mismatched_keys():
    engine = GridEngine()
    with pytest.raises(ValueError):
        engine.init_layout({"a": FieldPlacement("b")})


def test_idle_state():
    engine, _ = _make_engine(_make_expand_layout())
    assert engine.state.phase is DragPhase.IDLE
    assert engine.state.session is None


def test_drag_unknown_field_raises():
    engine, _ = _make_engine(_make_expand_layout())
    with pytest.raises(KeyError):
        engine.on_drag_start("missing", (0.0, 0.0))


def test_drag_hidden_field_raises():
    engine, _ = _make_engine(_make_layout(FieldPlacement.hidden("h")))
    with pytest.raises(ValueError):
        engine.on_drag_start("h", (0.0, 0.0))


def test_move_without_drag_raises():
    engine, _ = _make_engine(_make_expand_layout())
    with pytest.raises(RuntimeError):
        engine.on_drag_move((0.0, 0.0), CONTAINER)
    with pytest.raises(RuntimeError):
        engine.on_drag_end()


def test_small_move_reverts_on_end():
    layout = _make_expand_layout()
    engine, _ = _make_engine(layout)
    state = engine.on_drag_start("field2", (100.0, 100.0))
    assert state.phase is DragPhase.BELOW_THRESHOLD

    update = engine.on_drag_move((110.0, 80.0), CONTAINER)
    assert update.preview_info is None
    assert engine.state.phase is DragPhase.BELOW_THRESHOLD

    assert engine.on_drag_end() == layout
    assert engine.state.phase is DragPhase.IDLE


def test_drag_commits_auto_resize_preview():
    engine, _ = _make_engine(_make_expand_layout())
    engine.on_drag_start("field2", (100.0, 100.0))

    update = engine.on_drag_move((100.0, 30.0), CONTAINER)
    assert engine.state.phase is DragPhase.PREVIEWING
    assert update.hovered_row == 0
    assert update.preview_info.strategy is PlacementStrategy.AUTO_RESIZE
    # The dragged field follows the pointer until the drop
    assert update.display_layout["field2"].position == (0.0, 0.0)
    assert update.display_layout["field2"].width == 4 / 6

    result = engine.on_drag_end()
    assert result["field2"] == FieldPlacement("field2", x=2 / 6, y=0.0, width=4 / 6)
    assert result["field1"] == FieldPlacement("field1", x=0.0, y=0.0, width=2 / 6)
    assert engine.layout == result
    assert errors(validate_layout(result)) == []


def test_preview_is_throttled():
    engine, clock = _make_engine(_make_expand_layout())
    engine.on_drag_start("field2", (100.0, 100.0))

    engine.on_drag_move((100.0, 30.0), CONTAINER)
    assert engine.session.target_row == 0

    clock.now = 0.05
    engine.on_drag_move((100.0, 170.0), CONTAINER)
    assert engine.session.target_row == 0

    clock.now = 0.2
    update = engine.on_drag_move((100.0, 170.0), CONTAINER)
    assert engine.session.target_row == 2
    assert update.hovered_row == 2


def test_preview_same_row_is_not_recomputed():
    engine, clock = _make_engine(_make_expand_layout())
    engine.on_drag_start("field2", (100.0, 100.0))
    engine.on_drag_move((100.0, 30.0), CONTAINER)
    first = engine.session.preview

    clock.now = 1.0
    engine.on_drag_move((130.0, 25.0), CONTAINER)
    assert engine.session.preview is first
    assert engine.session.last_preview_at == 0.0


def test_hovering_back_gives_same_preview():
    engine, clock = _make_engine(_make_expand_layout())
    engine.on_drag_start("field2", (100.0, 100.0))
    engine.on_drag_move((100.0, 30.0), CONTAINER)
    first = engine.session.preview

    clock.now = 1.0
    engine.on_drag_move((100.0, 170.0), CONTAINER)
    clock.now = 2.0
    engine.on_drag_move((100.0, 30.0), CONTAINER)
    assert engine.session.preview == first


def test_cancel_restores_snapshot():
    layout = _make_expand_layout()
    engine, _ = _make_engine(layout)
    engine.on_drag_start("field2", (100.0, 100.0))
    engine.on_drag_move((100.0, 30.0), CONTAINER)
    assert engine.on_drag_cancel() == layout
    assert engine.session is None


def test_new_drag_replaces_active_one():
    layout = _make_expand_layout()
    engine, _ = _make_engine(layout)
    engine.on_drag_start("field2", (100.0, 100.0))
    engine.on_drag_move((100.0, 30.0), CONTAINER)
    engine.on_drag_start("field1", (0.0, 0.0))
    assert engine.session.dragged_id == "field1"
    assert engine.layout == layout


def test_drop_without_preview_relocates_and_only_reflows():
    layout = _make_layout(
        _make_field("a", 0, 0, 2),
        _make_field("b", 2, 0, 2),
    )
    engine, _ = _make_engine(layout, preview_enabled=False)
    engine.on_drag_start("b", (0.0, 0.0))
    update = engine.on_drag_move((0.0, -140.0), CONTAINER)
    assert update.preview_info is None

    result = engine.on_drag_end()
    # Snapped onto "a", moved to the next free slot; gaps are not filled
    assert result["b"] == FieldPlacement("b", x=2 / 6, y=0.0, width=2 / 6)
    assert result["a"] == layout["a"]
    assert errors(validate_layout(result)) == []


def test_drop_without_preview_reflows_empty_rows():
    layout = _make_layout(
        _make_field("a", 0, 0, 6),
        _make_field("b", 1, 0, 3),
        _make_field("c", 2, 0, 3),
    )
    engine, _ = _make_engine(layout, preview_enabled=False)
    engine.on_drag_start("b", (0.0, 0.0))
    engine.on_drag_move((300.0, 70.0), CONTAINER)
    result = engine.on_drag_end()
    assert result["b"] == FieldPlacement("b", x=0.5, y=70.0, width=0.5)
    assert result["c"] == FieldPlacement("c", x=0.0, y=70.0, width=0.5)


def test_near_snap_point_reported():
    engine, _ = _make_engine(_make_expand_layout())
    engine.on_drag_start("field2", (100.0, 100.0))
    assert engine.on_drag_move((100.0, 105.0), CONTAINER).near_snap_point
    assert not engine.on_drag_move((100.0, 135.0), CONTAINER).near_snap_point


def test_hide_reflows_rows():
    layout = _make_layout(
        _make_field("a", 0, 0, 6),
        _make_field("b", 1, 0, 6),
        _make_field("c", 2, 0, 6),
    )
    engine, _ = _make_engine(layout)
    result = engine.on_field_visibility_toggle("a")
    assert result["a"] == FieldPlacement.hidden("a")
    assert result["b"].y == 0.0
    assert result["c"].y == 70.0


def test_show_appends_full_width_row():
    layout = _make_layout(
        _make_field("a", 0, 0, 3),
        _make_field("b", 1, 0, 6),
        FieldPlacement.hidden("h"),
    )
    engine, _ = _make_engine(layout)
    result = engine.on_field_visibility_toggle("h")
    assert result["h"] == FieldPlacement("h", x=0.0, y=140.0, width=1.0)
    assert errors(validate_layout(result)) == []


def test_resize_steps_never_overlap_committed_layout():
    layout = _make_layout(_make_field("a", 0, 0, 2), _make_field("b", 0, 3, 3))
    engine, _ = _make_engine(layout)
    engine.on_resize_start("a")
    engine.on_resize_step("a", ResizeEdge.RIGHT, 60.0, CONTAINER)
    engine.on_resize_step("a", ResizeEdge.RIGHT, 60.0, CONTAINER)
    assert find_overlaps(engine.layout) == []
    assert engine.layout["a"].width == 0.5

    result = engine.on_resize_end("a")
    assert result["a"].width == 0.5
    assert errors(validate_layout(result)) == []


def test_toggle_unknown_field_raises():
    engine, _ = _make_engine(_make_expand_layout())
    with pytest.raises(KeyError):
        engine.on_field_visibility_toggle("missing")
    assert "missing" not in engine.layout


def test_show_appends_below_sparse_rows():
    layout = _make_layout(
        _make_field("a", 0, 0, 6),
        _make_field("b", 3, 0, 6),
        FieldPlacement.hidden("h"),
    )
    engine, _ = _make_engine(layout)
    result = engine.on_field_visibility_toggle("h")
    assert result["h"] == FieldPlacement("h", x=0.0, y=280.0, width=1.0)


def test_drag_commits_push_down_preview():
    layout = _make_layout(
        _make_field("field1", 0, 0, 2),
        _make_field("field3", 0, 2, 4),
        _make_field("field2", 1, 0, 3),
    )
    engine, _ = _make_engine(layout)
    engine.on_drag_start("field2", (100.0, 100.0))

    update = engine.on_drag_move((100.0, 30.0), CONTAINER)
    assert update.preview_info.strategy is PlacementStrategy.PUSH_DOWN

    result = engine.on_drag_end()
    # Alone in its row after the push, the dropped field takes the full width
    assert result["field2"] == FieldPlacement("field2", x=0.0, y=0.0, width=1.0)
    assert result["field1"] == FieldPlacement("field1", x=0.0, y=70.0, width=2 / 6)
    assert result["field3"] == FieldPlacement("field3", x=2 / 6, y=70.0, width=4 / 6)
    assert errors(validate_layout(result)) == []


def test_drop_after_throttled_move_uses_drop_row():
    engine, clock = _make_engine(_make_expand_layout())
    engine.on_drag_start("field2", (100.0, 100.0))
    engine.on_drag_move((100.0, 30.0), CONTAINER)
    assert engine.session.target_row == 0

    clock.now = 0.05
    engine.on_drag_move((100.0, 170.0), CONTAINER)
    assert engine.session.target_row == 0

    result = engine.on_drag_end()
    assert result["field2"] == FieldPlacement("field2", x=0.0, y=70.0, width=1.0)
    assert result["field1"] == FieldPlacement("field1", x=0.0, y=0.0, width=1.0)
