"""
Polyline sampling for corridor queries.

A corridor (linear buffer) is approximated by a chain of overlapping
circular queries. This module decides where those circles are centred.
"""

import logging
import math
from typing import Iterable, List

from nsidc.linebuffer import geometry
from nsidc.linebuffer.constants import SIXTY_DEGREES
from nsidc.linebuffer.models import LegInput, Point, QuerySection

logger = logging.getLogger(__name__)


def step_length(buffer_width: float) -> float:
    """
    Spacing between query centres, which is also the radius of each query.

    Two circles of this radius placed this far apart intersect at exactly
    buffer_width from the line joining their centres, so the chain of
    circles covers the whole corridor without gaps.
    """
    return buffer_width / math.sin(SIXTY_DEGREES)


def build_query_section(leg: LegInput, step: float) -> QuerySection:
    """
    Walks the leg and returns its sample points spaced step meters apart
    along every segment. Zero-length segments are skipped. The leg's last
    point always closes the section.
    """
    points = [Point.from_pair(p) for p in leg]
    start_point = points[0]
    end_point = points[0]
    total_distance = 0.0
    samples = []

    for end_point in points[1:]:
        segment_length = geometry.distance(start_point, end_point)
        if segment_length == 0:
            continue

        total_distance += segment_length
        samples.append(start_point)
        for _ in range(int(segment_length // step)):
            start_point = geometry.move_towards(start_point, end_point, step)
            samples.append(start_point)

        # The segment's end opens the next segment, so it is not stored here
        start_point = end_point

    samples.append(end_point)

    logger.debug(
        f"Sampled leg of {len(points)} points into {len(samples)} query points "
        f"({total_distance:.1f} m, step {step:.3f} m)"
    )
    return QuerySection(
        start=points[0],
        end=end_point,
        distance=total_distance,
        sample_points=tuple(samples),
    )


def build_query_sections(legs: Iterable[LegInput], step: float) -> List[QuerySection]:
    return [build_query_section(leg, step) for leg in legs]
