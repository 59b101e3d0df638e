"""
Data models for the linebuffer package.

This module contains the value types passed between the segmenter, the
query orchestrator and the analyzer facade.
"""

import dataclasses
from typing import Dict, Iterable, List, Sequence, Tuple, Union

from shapely.geometry import LineString
from shapely.geometry import Point as ShapelyPoint


@dataclasses.dataclass(frozen=True)
class Point:
    """A geographic location in decimal degrees."""

    latitude: float
    longitude: float

    @classmethod
    def from_pair(cls, pair: Union["Point", Sequence[float]]) -> "Point":
        """
        Build a Point from a [latitude, longitude] pair. Points are
        returned unchanged.
        """
        if isinstance(pair, Point):
            return pair
        latitude, longitude = pair
        return cls(float(latitude), float(longitude))

    def as_pair(self) -> List[float]:
        return [self.latitude, self.longitude]

    def as_lonlat(self) -> Tuple[float, float]:
        return (self.longitude, self.latitude)


# A leg as supplied by callers: [[lat, lng], ...] or a sequence of Points
LegInput = Sequence[Union[Point, Sequence[float]]]


@dataclasses.dataclass(frozen=True)
class QuerySection:
    """
    The sampled representation of one leg.

    The sample points are where the circular radius queries are issued.
    The first sample point is the leg's first point and the last sample
    point is the leg's last point.
    """

    start: Point
    end: Point
    distance: float  # meters, sum of the leg's segment lengths
    sample_points: Tuple[Point, ...]

    @property
    def query_polyline(self) -> List[List[float]]:
        return [p.as_pair() for p in self.sample_points]

    def as_linestring(self):
        """
        Returns the sample points as a shapely geometry in lon/lat order.
        A section with a single sample point is returned as a shapely Point.
        """
        coords = [p.as_lonlat() for p in self.sample_points]
        if len(coords) == 1:
            return ShapelyPoint(coords[0])
        return LineString(coords)

    def to_dict(self) -> dict:
        return {
            "start": self.start.as_pair(),
            "end": self.end.as_pair(),
            "distance": self.distance,
            "queryPolyline": self.query_polyline,
        }


@dataclasses.dataclass(frozen=True)
class IndexMatch:
    """One entry reported by the external index."""

    key: str
    location: Point

    def to_dict(self) -> dict:
        return {"key": self.key, "location": self.location.as_pair()}


@dataclasses.dataclass
class LegResult:
    """The matches found along one leg, keyed by index key."""

    query_section: QuerySection
    matches: Dict[str, IndexMatch] = dataclasses.field(default_factory=dict)

    @property
    def keys(self) -> List[str]:
        return list(self.matches)

    def to_dict(self) -> dict:
        return {
            "querySection": self.query_section.to_dict(),
            "queryResult": {k: m.to_dict() for k, m in self.matches.items()},
        }


AnalysisResult = List[LegResult]


def unique_matches(results: Iterable[LegResult]) -> List[IndexMatch]:
    """
    All matches across every leg, deduplicated by key. When legs share a
    key the first leg to report it wins.
    """
    seen = {}
    for result in results:
        for key, match in result.matches.items():
            seen.setdefault(key, match)
    return list(seen.values())
