"""Tests for the geometry module."""

import math

import pytest

from nsidc.linebuffer import geometry
from nsidc.linebuffer.constants import EARTH_RADIUS_M
from nsidc.linebuffer.models import Point


def north_of(point, meters):
    lon, lat, _ = geometry.GEOD.fwd(point.longitude, point.latitude, 0, meters)
    return Point(lat, lon)


@pytest.fixture
def segment():
    """A roughly 1.1 km east-west segment along the equator."""
    return Point(0.0, 0.0), Point(0.0, 0.01)


class TestDistance:
    """Test suite for great-circle distance."""

    def test_same_point(self):
        p = Point(45.0, -120.0)
        assert geometry.distance(p, p) == 0

    def test_along_equator(self, segment):
        expected = EARTH_RADIUS_M * math.radians(0.01)
        assert geometry.distance(*segment) == pytest.approx(expected, abs=0.01)

    def test_symmetric(self):
        p1, p2 = Point(40.0, -105.0), Point(40.1, -105.2)
        assert geometry.distance(p1, p2) == pytest.approx(geometry.distance(p2, p1))


class TestMoveTowards:
    """Test suite for moving along a great circle."""

    def test_moves_requested_distance(self, segment):
        start, end = segment
        moved = geometry.move_towards(start, end, 100)
        assert geometry.distance(start, moved) == pytest.approx(100, abs=1e-6)

    def test_stays_on_the_path(self, segment):
        start, end = segment
        moved = geometry.move_towards(start, end, 100)
        total = geometry.distance(start, end)
        assert geometry.distance(moved, end) == pytest.approx(total - 100, abs=1e-6)

    def test_diagonal_path(self):
        start, end = Point(60.0, 10.0), Point(60.01, 10.02)
        moved = geometry.move_towards(start, end, 250)
        assert geometry.distance(start, moved) + geometry.distance(
            moved, end
        ) == pytest.approx(geometry.distance(start, end), abs=1e-6)


class TestClosestDistanceToSegment:
    """Test suite for point to segment distance."""

    def test_degenerate_segment_is_point_distance(self):
        s = Point(10.0, 10.0)
        p = Point(10.001, 10.002)
        assert geometry.closest_distance_to_segment(s, s, p) == geometry.distance(s, p)

    def test_perpendicular_distance(self, segment):
        midpoint = Point(0.0, 0.005)
        p = north_of(midpoint, 40)
        assert geometry.closest_distance_to_segment(*segment, p) == pytest.approx(
            40, abs=0.01
        )

    def test_beyond_end_uses_end_distance(self, segment):
        start, end = segment
        p = north_of(Point(0.0, 0.012), 10)
        assert geometry.closest_distance_to_segment(start, end, p) == geometry.distance(
            end, p
        )

    def test_before_start_uses_start_distance(self, segment):
        start, end = segment
        p = north_of(Point(0.0, -0.002), 10)
        assert geometry.closest_distance_to_segment(
            start, end, p
        ) == geometry.distance(start, p)

    def test_point_on_start(self, segment):
        start, end = segment
        assert geometry.closest_distance_to_segment(start, end, start) == 0

    def test_point_on_end(self, segment):
        start, end = segment
        assert geometry.closest_distance_to_segment(start, end, end) == 0

    def test_collinear_point_uses_nearer_endpoint(self, segment):
        start, end = segment
        p = Point(0.0, 0.003)
        expected = min(geometry.distance(start, p), geometry.distance(end, p))
        assert geometry.closest_distance_to_segment(start, end, p) == pytest.approx(
            expected
        )

    def test_never_exceeds_endpoint_distances(self, segment):
        start, end = segment
        for offset in [1, 10, 100, 1000]:
            p = north_of(Point(0.0, 0.004), offset)
            d = geometry.closest_distance_to_segment(start, end, p)
            assert d <= geometry.distance(start, p)
            assert d <= geometry.distance(end, p)
