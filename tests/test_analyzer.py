"""Tests for the analyzer module."""

import asyncio
import math

import pytest

from nsidc.linebuffer import geometry
from nsidc.linebuffer.analyzer import BufferAnalyzer
from nsidc.linebuffer.errors import ConstructionError, ValidationError
from nsidc.linebuffer.index import InMemoryIndex, SubscriptionIndex
from nsidc.linebuffer.models import Point, unique_matches


def offset(point, meters, azimuth=0):
    lon, lat, _ = geometry.GEOD.fwd(point.longitude, point.latitude, azimuth, meters)
    return Point(lat, lon)


class RecordingIndex:
    def __init__(self):
        self.calls = []

    async def query(self, center, radius_km):
        self.calls.append(center)
        return []


class SyncIndex:
    def query(self, center, radius_km):
        return []


@pytest.fixture
def recording_index():
    return RecordingIndex()


@pytest.fixture
def polyline():
    """A three segment polyline near Boulder, CO."""
    return [[40.0, -105.0], [40.0, -104.99], [40.005, -104.985], [40.005, -104.975]]


@pytest.fixture
def polyline_points(polyline):
    """Points either comfortably inside or outside a 50 m buffer of the polyline."""
    first, second, third, fourth = [Point(*p) for p in polyline]

    def between(p1, p2, fraction):
        return geometry.move_towards(p1, p2, geometry.distance(p1, p2) * fraction)

    inside = {
        "in-1": offset(between(first, second, 0.3), 30),
        "in-2": offset(between(first, second, 0.8), 45, azimuth=180),
        "in-3": offset(between(second, third, 0.5), 20, azimuth=315),
        "in-4": offset(between(third, fourth, 0.1), 48),
        "in-5": offset(fourth, 40, azimuth=90),
        "in-6": second,
    }
    outside = {
        "out-1": offset(between(first, second, 0.5), 60),
        "out-2": offset(between(third, fourth, 0.5), 70, azimuth=180),
        "out-3": offset(first, 55, azimuth=270),
        "out-4": offset(fourth, 80, azimuth=90),
        "out-5": Point(41.0, -105.0),
    }
    return inside, outside


def analyze(index, legs, width):
    return asyncio.run(BufferAnalyzer(SubscriptionIndex(index)).analyze(legs, width))


class TestConstruction:
    """Test suite for analyzer construction."""

    @pytest.mark.parametrize("index", [1, None, "", object()])
    def test_rejects_non_index(self, index):
        with pytest.raises(ConstructionError):
            BufferAnalyzer(index)

    def test_rejects_synchronous_query(self):
        with pytest.raises(ConstructionError):
            BufferAnalyzer(SyncIndex())

    def test_rejects_raw_event_index(self):
        with pytest.raises(ConstructionError):
            BufferAnalyzer(InMemoryIndex())

    def test_construction_error_is_a_type_error(self):
        with pytest.raises(TypeError):
            BufferAnalyzer(1)

    def test_accepts_geo_index(self, recording_index):
        assert BufferAnalyzer(recording_index).index is recording_index


class TestValidation:
    """Test suite for argument validation, before any query is issued."""

    @pytest.mark.parametrize("width", ["bufferWidth", None, True, 0.05, 0.09, -1, math.nan])
    def test_invalid_buffer_width(self, recording_index, width):
        analyzer = BufferAnalyzer(recording_index)
        with pytest.raises(ValidationError):
            analyzer.analyze([[[0, 0], [0, 0.01]]], width)
        assert recording_index.calls == []

    def test_minimum_buffer_width_accepted(self, recording_index):
        analyzer = BufferAnalyzer(recording_index)
        asyncio.run(analyzer.analyze([[[0, 0], [0, 0.0001]]], 0.1))
        assert recording_index.calls

    def test_validation_error_is_a_value_error(self, recording_index):
        with pytest.raises(ValueError):
            BufferAnalyzer(recording_index).analyze([], 0.05)

    @pytest.mark.parametrize(
        "leg", [[], [[0]], [["a", "b"]], [[0, 0], [91, 0]], [[0, 0], [0, 181]]]
    )
    def test_invalid_leg(self, recording_index, leg):
        with pytest.raises(ValidationError):
            BufferAnalyzer(recording_index).analyze([leg], 50)
        assert recording_index.calls == []


class TestAnalyze:
    """Test suite for buffer analysis against an in-memory index."""

    def test_no_legs(self, recording_index):
        results = asyncio.run(BufferAnalyzer(recording_index).analyze([], 50))

        assert results == []
        assert recording_index.calls == []

    def test_short_segment(self):
        midpoint = Point(0.0, 0.005)
        index = InMemoryIndex(
            {"in": offset(midpoint, 40), "out": offset(midpoint, 60)}
        )
        results = analyze(index, [[[0, 0], [0, 0.01]]], 50)

        assert len(results) == 1
        assert results[0].keys == ["in"]
        assert index.active_queries == 0

    def test_buffer_edge(self):
        midpoint = Point(0.0, 0.005)
        index = InMemoryIndex(
            {"edge": offset(midpoint, 50), "beyond": offset(midpoint, 50.5)}
        )
        results = analyze(index, [[[0, 0], [0, 0.01]]], 50)

        assert results[0].keys == ["edge"]

    def test_polyline(self, polyline, polyline_points):
        inside, outside = polyline_points
        index = InMemoryIndex({**inside, **outside})
        results = analyze(index, [polyline], 50)

        assert set(results[0].matches) == set(inside)
        for key, location in inside.items():
            assert results[0].matches[key].location == location

    def test_reversed_polyline(self, polyline, polyline_points):
        inside, outside = polyline_points
        index = InMemoryIndex({**inside, **outside})
        forward = analyze(index, [polyline], 50)
        backward = analyze(index, [list(reversed(polyline))], 50)

        assert set(forward[0].matches) == set(backward[0].matches)

    def test_point_buffer(self):
        center = Point(45.0, -120.0)
        index = InMemoryIndex(
            {
                "in-1": offset(center, 30),
                "in-2": offset(center, 49, azimuth=200),
                "out": offset(center, 70, azimuth=90),
            }
        )
        results = analyze(index, [[center.as_pair()], [center.as_pair(), center.as_pair()]], 50)

        assert set(results[0].matches) == {"in-1", "in-2"}
        assert set(results[1].matches) == {"in-1", "in-2"}

    def test_leg_order(self, polyline):
        leg_a = polyline
        leg_b = [[0, 0], [0, 0.001]]
        index = InMemoryIndex({"b": Point(0, 0.0005)})
        results = analyze(index, [leg_a, leg_b], 50)

        assert results[0].query_section.start == Point(*leg_a[0])
        assert results[1].query_section.start == Point(*leg_b[0])
        assert results[0].keys == []
        assert results[1].keys == ["b"]

    def test_legs_sharing_points(self, polyline, polyline_points):
        inside, _ = polyline_points
        index = InMemoryIndex(inside)
        results = analyze(index, [polyline, polyline[1:]], 50)

        assert len(unique_matches(results)) == len(inside)

    def test_result_encoding(self):
        index = InMemoryIndex({"a": Point(0, 0.0005)})
        results = analyze(index, [[[0, 0], [0, 0.001]]], 50)
        encoded = results[0].to_dict()

        assert encoded["querySection"]["start"] == [0.0, 0.0]
        assert encoded["querySection"]["end"] == [0.0, 0.001]
        assert encoded["querySection"]["queryPolyline"][0] == [0.0, 0.0]
        assert encoded["queryResult"] == {"a": {"key": "a", "location": [0.0, 0.0005]}}
