"""Tests for shared/geometry.py pure functions."""
import math
import pytest
from shared.geometry import (
    GeometryError,
    distance, lerp, left_norm, off_pt, line_isect,
    line_intersection, point_to_line_distance, parametric_position, points_equal,
    signed_area, poly_area, point_in_polygon, segments_cross, polygon_self_intersects,
    fmt_length,
)


# ============================================================
# Basic vector helpers
# ============================================================

def test_distance():
    assert distance((0, 0), (3, 4)) == pytest.approx(5)


def test_lerp_midpoint():
    assert lerp((0, 0), (10, 20), 0.5) == pytest.approx((5, 10))


class TestLeftNorm:
    def test_east_points_north_in_math_coords(self):
        assert left_norm((0, 0), (10, 0)) == pytest.approx((0, 1))

    def test_unit_length(self):
        n = left_norm((1, 2), (4, 6))
        assert math.hypot(*n) == pytest.approx(1)

    def test_zero_length_raises(self):
        with pytest.raises(GeometryError):
            left_norm((5, 5), (5, 5))


def test_off_pt():
    assert off_pt((1, 1), (0, 1), 3) == pytest.approx((1, 4))


class TestLineIsect:
    def test_perpendicular(self):
        assert line_isect((0, 0), (1, 0), (5, -5), (0, 1)) == pytest.approx((5, 0))

    def test_parallel_raises(self):
        with pytest.raises(GeometryError):
            line_isect((0, 0), (1, 0), (0, 1), (2, 0))


# ============================================================
# Segment intersection and projection
# ============================================================

class TestLineIntersection:
    def test_crossing_segments(self):
        hit = line_intersection((0, 0), (10, 10), (0, 10), (10, 0))
        assert (hit.x, hit.y) == pytest.approx((5, 5))
        assert hit.ua == pytest.approx(0.5) and hit.ub == pytest.approx(0.5)
        assert hit.on_line1 and hit.on_line2

    def test_hit_outside_second_segment(self):
        hit = line_intersection((0, 0), (10, 0), (20, -5), (20, 5))
        assert (hit.x, hit.y) == pytest.approx((20, 0))
        assert not hit.on_line1
        assert hit.on_line2

    def test_parallel_is_none(self):
        assert line_intersection((0, 0), (10, 0), (0, 5), (10, 5)) is None

    def test_touching_endpoint_counts(self):
        hit = line_intersection((0, 0), (10, 0), (10, 0), (10, 10))
        assert hit.on_line1 and hit.on_line2


class TestPointToLineDistance:
    def test_perpendicular_foot(self):
        r = point_to_line_distance(5, 3, 0, 0, 10, 0)
        assert r.distance == pytest.approx(3)
        assert r.point == pytest.approx((5, 0))
        assert r.param == pytest.approx(0.5)

    def test_clamped_before_start(self):
        r = point_to_line_distance(-3, 4, 0, 0, 10, 0)
        assert r.point == (0, 0)
        assert r.distance == pytest.approx(5)
        assert r.param < 0

    def test_clamped_after_end(self):
        r = point_to_line_distance(13, 0, 0, 0, 10, 0)
        assert r.point == (10, 0)
        assert r.param == pytest.approx(1.3)

    def test_zero_length_segment(self):
        r = point_to_line_distance(1, 1, 2, 2, 2, 2)
        assert r.distance == math.inf


def test_parametric_position():
    assert parametric_position((25, 7), (0, 0), (100, 0)) == pytest.approx(0.25)
    assert parametric_position((1, 1), (3, 3), (3, 3)) == 0.0


def test_points_equal():
    assert points_equal((1, 1), (1.0005, 0.9995))
    assert not points_equal((1, 1), (1.01, 1))


# ============================================================
# Polygon utilities
# ============================================================

class TestArea:
    def test_clockwise_on_screen_is_positive(self):
        # y grows downward: right, down, left is clockwise on screen
        assert signed_area([(0, 0), (10, 0), (10, 10), (0, 10)]) == pytest.approx(100)

    def test_reversed_winding_is_negative(self):
        assert signed_area([(0, 0), (0, 10), (10, 10), (10, 0)]) == pytest.approx(-100)

    def test_poly_area_ignores_winding(self):
        assert poly_area([(0, 0), (0, 10), (10, 10), (10, 0)]) == pytest.approx(100)


class TestPointInPolygon:
    SQ = [(0, 0), (10, 0), (10, 10), (0, 10)]

    def test_inside(self):
        assert point_in_polygon((5, 5), self.SQ)

    def test_outside(self):
        assert not point_in_polygon((15, 5), self.SQ)

    def test_notch_is_outside(self):
        u = [(0, 0), (30, 0), (30, 30), (20, 30), (20, 10), (10, 10), (10, 30), (0, 30)]
        assert not point_in_polygon((15, 20), u)
        assert point_in_polygon((5, 20), u)


class TestSegmentsCross:
    def test_x_cross(self):
        assert segments_cross((0, 0), (10, 10), (0, 10), (10, 0))

    def test_shared_endpoint_is_not_a_cross(self):
        assert not segments_cross((0, 0), (10, 0), (10, 0), (10, 10))

    def test_collinear_is_not_a_cross(self):
        assert not segments_cross((0, 0), (10, 0), (5, 0), (15, 0))


class TestPolygonSelfIntersects:
    def test_square(self):
        assert not polygon_self_intersects([(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)])

    def test_bow_tie(self):
        assert polygon_self_intersects([(0, 0), (10, 10), (10, 0), (0, 10), (0, 0)])

    def test_triangle(self):
        assert not polygon_self_intersects([(0, 0), (10, 0), (5, 8), (0, 0)])


def test_fmt_length():
    assert fmt_length(100) == "100.0"
    assert fmt_length(12.345) == "12.3"
