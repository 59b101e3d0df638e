"""
Fan-out and merge of the circular queries that make up a corridor query.

Every sample point of a query section gets its own radius query. The query
radius is wider than the buffer, so each reported entry is checked against
the exact distance to the segments on either side of the sample point
before it is accepted. Per-point results are merged with first-seen-wins
deduplication by key.
"""

import asyncio
import logging
import math
from typing import Iterable, List, Optional, Sequence

from funcy import lcat

from nsidc.linebuffer import geometry
from nsidc.linebuffer.constants import METERS_PER_KILOMETER, MIN_BUFFER_WIDTH
from nsidc.linebuffer.index import GeoIndex
from nsidc.linebuffer.models import IndexMatch, LegResult, Point, QuerySection

logger = logging.getLogger(__name__)


def is_within_buffer(min_distance: float, buffer_width: float) -> bool:
    return min_distance - buffer_width <= MIN_BUFFER_WIDTH


def proximity_distance(
    prev_point: Optional[Point],
    current_point: Point,
    next_point: Optional[Point],
    location: Point,
) -> float:
    """
    Distance from location to the stretch of corridor around current_point:
    the segments to its neighbours, plus the point itself when it ends the
    section.
    """
    distances = [math.inf]
    if prev_point is not None:
        distances.append(
            geometry.closest_distance_to_segment(prev_point, current_point, location)
        )
    if next_point is not None:
        distances.append(
            geometry.closest_distance_to_segment(current_point, next_point, location)
        )
    if prev_point is None or next_point is None:
        distances.append(geometry.distance(current_point, location))
    return min(distances)


async def query_sample_point(
    index: GeoIndex,
    prev_point: Optional[Point],
    current_point: Point,
    next_point: Optional[Point],
    query_radius_km: float,
    buffer_width: float,
) -> List[IndexMatch]:
    found = await index.query(current_point, query_radius_km)
    accepted = [
        match
        for match in found
        if is_within_buffer(
            proximity_distance(prev_point, current_point, next_point, match.location),
            buffer_width,
        )
    ]
    logger.debug(
        f"Query at {current_point.as_pair()} returned {len(found)} entries, "
        f"{len(accepted)} inside the buffer"
    )
    return accepted


def merge_matches(results: Iterable[Sequence[IndexMatch]]) -> dict:
    """
    Joins per-point results into one mapping of key to match. The first
    occurrence of a key is kept.
    """
    merged = {}
    for match in lcat(results):
        merged.setdefault(match.key, match)
    return merged


async def query_section(
    index: GeoIndex, section: QuerySection, query_radius: float, buffer_width: float
) -> LegResult:
    """
    Runs one radius query per sample point concurrently and merges them.
    query_radius is in meters; the index expects kilometers.
    """
    query_radius_km = query_radius / METERS_PER_KILOMETER
    points = section.sample_points
    neighbours = zip(
        [None, *points[:-1]],
        points,
        [*points[1:], None],
    )

    results = await asyncio.gather(
        *[
            query_sample_point(
                index, prev_point, point, next_point, query_radius_km, buffer_width
            )
            for prev_point, point, next_point in neighbours
        ]
    )
    return LegResult(section, merge_matches(results))


async def query_sections(
    index: GeoIndex,
    sections: Sequence[QuerySection],
    query_radius: float,
    buffer_width: float,
) -> List[LegResult]:
    """Processes every section concurrently; results keep the input order."""
    return list(
        await asyncio.gather(
            *[
                query_section(index, section, query_radius, buffer_width)
                for section in sections
            ]
        )
    )
