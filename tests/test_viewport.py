"""
Tests for the map viewport transform.

Run with: python -m pytest tests/test_viewport.py
"""

import pytest

from conftest import GOLD_COIN, MAP_SHARD
from logic.viewport import (
    MAX_ZOOM,
    MIN_ZOOM,
    Viewport,
    layout_scale,
    marker_position,
    marker_positions,
)


class TestZoom:

    def test_zoom_in_is_clamped(self):
        viewport = Viewport()
        for _ in range(50):
            viewport.zoom_in()
            assert viewport.zoom <= MAX_ZOOM
        assert viewport.zoom == MAX_ZOOM

    def test_zoom_out_is_clamped(self):
        viewport = Viewport()
        for _ in range(50):
            viewport.zoom_out()
            assert viewport.zoom >= MIN_ZOOM
        assert viewport.zoom == MIN_ZOOM

    def test_single_step(self):
        viewport = Viewport()
        assert viewport.zoom_in() == pytest.approx(1.2)
        assert viewport.zoom_out() == pytest.approx(1.0)
        assert viewport.zoom_out() == pytest.approx(1 / 1.2)

    def test_zoom_does_not_reset_pan(self):
        viewport = Viewport()
        viewport.start_drag(10, 10)
        viewport.move_drag(40, 30)
        viewport.end_drag()

        viewport.zoom_in()
        viewport.zoom_out()

        assert (viewport.pan_x, viewport.pan_y) == (30, 20)

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            Viewport(min_zoom=2.0, max_zoom=1.0)
        with pytest.raises(ValueError):
            Viewport(step=1.0)


class TestPan:

    def test_drag_moves_by_pointer_delta(self):
        viewport = Viewport()
        viewport.start_drag(100, 100)
        viewport.move_drag(150, 80)

        assert (viewport.pan_x, viewport.pan_y) == (50, -20)

    def test_second_drag_continues_from_last_offset(self):
        viewport = Viewport()
        viewport.start_drag(0, 0)
        viewport.move_drag(50, 50)
        viewport.end_drag()

        viewport.start_drag(200, 200)
        viewport.move_drag(210, 190)

        assert (viewport.pan_x, viewport.pan_y) == (60, 40)

    def test_move_without_drag_is_ignored(self):
        viewport = Viewport()
        assert viewport.move_drag(300, 300) is False
        assert (viewport.pan_x, viewport.pan_y) == (0, 0)

    def test_move_after_end_is_ignored(self):
        viewport = Viewport()
        viewport.start_drag(0, 0)
        viewport.move_drag(20, 20)
        viewport.end_drag()
        viewport.move_drag(500, 500)

        assert (viewport.pan_x, viewport.pan_y) == (20, 20)
        assert viewport.dragging is False

    def test_marker_press_does_not_start_drag(self):
        viewport = Viewport()
        assert viewport.pointer_down(10, 10, on_marker=True) is False
        assert viewport.dragging is False

        viewport.move_drag(100, 100)
        assert (viewport.pan_x, viewport.pan_y) == (0, 0)

    def test_surface_press_starts_drag(self):
        viewport = Viewport()
        assert viewport.pointer_down(10, 10) is True
        assert viewport.dragging is True


class TestMarkers:

    def test_layout_scale(self):
        assert layout_scale(900) == 1.0
        assert layout_scale(450) == 0.5
        assert layout_scale(1800, reference_width=900) == 2.0
        with pytest.raises(ValueError):
            layout_scale(900, reference_width=0)

    def test_marker_position_uses_layout_scale_only(self):
        viewport = Viewport()
        viewport.zoom_in()
        viewport.zoom_in()

        assert marker_position(GOLD_COIN, layout_scale(450)) == (50, 100)

    def test_resize_changes_markers_not_zoom(self):
        viewport = Viewport()
        viewport.zoom_in()
        zoom = viewport.zoom

        wide = marker_positions([MAP_SHARD], 900)
        narrow = marker_positions([MAP_SHARD], 300)

        assert wide[0]["left"] == 450 and wide[0]["top"] == 300
        assert narrow[0]["left"] == pytest.approx(150) and narrow[0]["top"] == pytest.approx(100)
        assert viewport.zoom == zoom

    def test_transform_css(self):
        viewport = Viewport()
        viewport.start_drag(0, 0)
        viewport.move_drag(5, 7)
        viewport.zoom_in()

        transform = viewport.transform()

        assert transform["pan"] == {"x": 5, "y": 7}
        assert transform["zoom"] == pytest.approx(1.2)
        assert transform["css"] == "translate(5px, 7px) scale(1.2)"
