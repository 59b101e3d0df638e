"""
Linear buffer analysis against a point index that only answers circular
radius queries.
"""

import inspect
import logging
import math
import numbers
from typing import Awaitable, List, Sequence

from nsidc.linebuffer import orchestrator, segmenter
from nsidc.linebuffer.constants import MIN_BUFFER_WIDTH
from nsidc.linebuffer.errors import ConstructionError, ValidationError
from nsidc.linebuffer.index import GeoIndex
from nsidc.linebuffer.models import AnalysisResult, LegInput, Point

logger = logging.getLogger(__name__)


class BufferAnalyzer:
    """
    Reports every indexed point lying within a given width of a polyline.

    The index must already be populated; the analyzer only queries it.
    """

    def __init__(self, index: GeoIndex):
        if not isinstance(index, GeoIndex) or not inspect.iscoroutinefunction(
            index.query
        ):
            raise ConstructionError(
                "index needs a coroutine query(center, radius_km) method."
            )
        self._index = index

    @property
    def index(self) -> GeoIndex:
        return self._index

    def analyze(
        self, legs: Sequence[LegInput], buffer_width: float
    ) -> Awaitable[AnalysisResult]:
        """
        Finds the indexed points within buffer_width meters of each leg.

        Arguments are checked before anything is queried and invalid ones
        raise ValidationError from this call. The returned awaitable
        resolves to one LegResult per leg, in the order the legs were given.
        """
        validate_buffer_width(buffer_width)
        point_legs = [validate_leg(leg, n) for n, leg in enumerate(legs)]

        step = segmenter.step_length(buffer_width)
        sections = segmenter.build_query_sections(point_legs, step)
        logger.info(
            f"Analyzing {len(sections)} legs with a {buffer_width} m buffer "
            f"({sum(len(s.sample_points) for s in sections)} radius queries)"
        )
        return orchestrator.query_sections(self._index, sections, step, buffer_width)


def validate_buffer_width(buffer_width) -> None:
    if isinstance(buffer_width, bool) or not isinstance(buffer_width, numbers.Real):
        raise ValidationError("Invalid buffer width.")
    if math.isnan(buffer_width) or buffer_width < MIN_BUFFER_WIDTH:
        raise ValidationError(
            f"Buffer width cannot be smaller than ({MIN_BUFFER_WIDTH}) meters."
        )


def validate_leg(leg: LegInput, number: int) -> List[Point]:
    """Returns the leg as Points, or raises ValidationError."""
    try:
        points = [Point.from_pair(p) for p in leg]
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Leg {number} has a malformed point: {e}") from e

    if not points:
        raise ValidationError(f"Leg {number} has no points.")
    for p in points:
        if not (-90 <= p.latitude <= 90 and -180 <= p.longitude <= 180):
            raise ValidationError(f"Leg {number} has an invalid point {p.as_pair()}.")
    return points
