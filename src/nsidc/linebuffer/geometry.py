"""
Great-circle helpers used to build and refine corridor queries.

Distances are in meters on a spherical earth. The corridor widths this
package deals with are small enough that the difference from an
ellipsoidal model is negligible.
"""

import math

from pyproj import Geod

from nsidc.linebuffer.constants import (
    DEGENERATE_SEGMENT_LENGTH,
    EARTH_RADIUS_M,
    MAX_STABLE_ANGLE,
    MIN_BUFFER_WIDTH,
    MIN_STABLE_ANGLE,
)
from nsidc.linebuffer.models import Point

GEOD = Geod(a=EARTH_RADIUS_M, b=EARTH_RADIUS_M)


def distance(p1: Point, p2: Point) -> float:
    """Great-circle distance in meters between two points."""
    _, _, meters = GEOD.inv(p1.longitude, p1.latitude, p2.longitude, p2.latitude)
    return meters


def move_towards(start: Point, towards: Point, by_meters: float) -> Point:
    """
    Returns the point reached by travelling by_meters from start along the
    great circle through towards.

    The two points must be distinct; callers are expected to skip
    zero-length segments before calling.
    """
    azimuth, _, _ = GEOD.inv(
        start.longitude, start.latitude, towards.longitude, towards.latitude
    )
    lon, lat, _ = GEOD.fwd(start.longitude, start.latitude, azimuth, by_meters)
    return Point(lat, lon)


def closest_distance_to_segment(
    segment_start: Point, segment_end: Point, point: Point
) -> float:
    """
    Shortest distance in meters from point to the segment between
    segment_start and segment_end.

    Uses the triangle formed by the three points: a is the segment length,
    b and c the distances from the segment's start and end to the point.
    When the foot of the perpendicular falls inside the segment the answer
    is sin(C) * b, where C is the angle at segment_start; otherwise it is
    the distance to the nearer endpoint. The order of the checks below
    decides which degenerate case wins and must be kept.
    """
    a = distance(segment_start, segment_end)
    b = distance(segment_start, point)
    c = distance(segment_end, point)

    # The segment is so short that it is effectively a point
    if a < DEGENERATE_SEGMENT_LENGTH:
        return min(b, c)

    # The point sits on one of the endpoints
    if b < MIN_BUFFER_WIDTH:
        return b
    if c < MIN_BUFFER_WIDTH:
        return c

    # Angle at segment_end is 90 degrees or more: the end is the nearest spot
    cos_b = (a * a + c * c - b * b) / (2 * a * c)
    if cos_b <= 0:
        return c

    # Angle at segment_start is 90 degrees or more: the start is the nearest spot
    cos_c = (a * a + b * b - c * c) / (2 * a * b)
    if cos_c <= 0:
        return b

    # Collinear points; there is no triangle to speak of
    if cos_c <= -1 or cos_c >= 1:
        return min(b, c)

    angle_c = math.acos(cos_c)
    if angle_c < MIN_STABLE_ANGLE or angle_c > MAX_STABLE_ANGLE:
        return min(b, c)

    return math.sin(angle_c) * b
