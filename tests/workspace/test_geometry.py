"""Tests for workspace geometry."""

import pytest

from termlayout.workspace import (
    Axis,
    Rect,
    compute_rects,
    group_at,
    layout_measurement,
    start_drag,
)

BOUNDS = Rect(0, 0, 1000, 500)


class TestComputeRects:
    """Tests for compute_rects."""

    def test_single_group_fills_bounds(self, single):
        assert compute_rects(single, BOUNDS) == {"g1": BOUNDS}

    def test_vertical_divides_width(self, pair):
        rects = compute_rects(pair, BOUNDS)
        assert rects["g1"] == Rect(0, 0, 500, 500)
        assert rects["g2"] == Rect(500, 0, 500, 500)

    def test_nested(self, nested):
        rects = compute_rects(nested, BOUNDS)
        assert rects["s1"] == BOUNDS
        assert rects["g1"].width == pytest.approx(300)
        assert rects["s2"].x == pytest.approx(300)
        assert rects["s2"].width == pytest.approx(700)
        # HORIZONTAL split stacks children, dividing height
        assert rects["g2"].height == pytest.approx(200)
        assert rects["g3"].y == pytest.approx(200)
        assert rects["g3"].height == pytest.approx(300)
        assert rects["g3"].width == pytest.approx(700)

    def test_offset_bounds(self, pair):
        rects = compute_rects(pair, Rect(10, 20, 200, 100))
        assert rects["g2"] == Rect(110, 20, 100, 100)


class TestMeasurement:
    """Tests for layout_measurement."""

    def test_extent_per_axis(self, nested):
        measure = layout_measurement(compute_rects(nested, BOUNDS))
        assert measure("s1", Axis.WIDTH) == 1000
        assert measure("s2", Axis.HEIGHT) == 500

    def test_unknown_measures_zero(self, pair):
        measure = layout_measurement(compute_rects(pair, BOUNDS))
        assert measure("missing", Axis.WIDTH) == 0

    def test_drives_drag_session(self, nested):
        measure = layout_measurement(compute_rects(nested, BOUNDS))
        session = start_drag(nested, "s2", 0, measure)
        assert session.container_size == 500


class TestHitTest:
    """Tests for group_at."""

    def test_point_in_each_group(self, nested):
        assert group_at(nested, BOUNDS, 10, 10) == "g1"
        assert group_at(nested, BOUNDS, 600, 100) == "g2"
        assert group_at(nested, BOUNDS, 600, 400) == "g3"

    def test_outside_bounds(self, nested):
        assert group_at(nested, BOUNDS, 2000, 10) is None

    def test_rect_to_dict(self):
        assert Rect(1, 2, 3, 4).to_dict() == {"x": 1, "y": 2, "width": 3, "height": 4}
