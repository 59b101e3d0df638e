"""
The point index collaborator.

The analyzer only ever talks to a GeoIndex: something with a coroutine
``query(center, radius_km)`` that resolves to the entries inside the circle.
Event-style indexes, which report entries through "key_entered" callbacks
followed by a single "ready" signal, are adapted with SubscriptionIndex.
InMemoryIndex is such an event-style index, used by the command line tool
and the tests.
"""

import asyncio
import logging
import math
from typing import Callable, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from shapely import STRtree
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import box

from nsidc.linebuffer import geometry
from nsidc.linebuffer.constants import (
    EARTH_RADIUS_M,
    KEY_ENTERED_EVENT,
    METERS_PER_KILOMETER,
    READY_EVENT,
)
from nsidc.linebuffer.models import IndexMatch, Point

logger = logging.getLogger(__name__)

# Widens the longitude extent of a query's bounding box
BBOX_MARGIN = 1.1


@runtime_checkable
class GeoIndex(Protocol):
    async def query(self, center: Point, radius_km: float) -> List[IndexMatch]: ...


class Subscription(Protocol):
    def on(self, event: str, callback: Callable) -> None: ...

    def cancel(self) -> None: ...


class EventIndex(Protocol):
    def query(self, center: Point, radius_km: float) -> Subscription: ...


class SubscriptionIndex:
    """
    Adapts an event-style index to the GeoIndex interface.

    Each query collects the entries reported before the "ready" signal,
    then cancels the subscription to release the index's resources.
    """

    def __init__(self, event_index: EventIndex):
        self.event_index = event_index

    async def query(self, center: Point, radius_km: float) -> List[IndexMatch]:
        loop = asyncio.get_running_loop()
        ready = loop.create_future()
        matches = []

        def on_key_entered(key, location):
            if not ready.done():
                matches.append(IndexMatch(key, Point.from_pair(location)))

        def on_ready(*_):
            if not ready.done():
                ready.set_result(None)

        subscription = self.event_index.query(center, radius_km)
        subscription.on(KEY_ENTERED_EVENT, on_key_entered)
        subscription.on(READY_EVENT, on_ready)
        try:
            await ready
        finally:
            subscription.cancel()

        return matches


class InMemoryQuery:
    """A subscription to an InMemoryIndex radius query."""

    def __init__(self, index: "InMemoryIndex", center: Point, radius_km: float):
        self.index = index
        self.center = center
        self.radius_km = radius_km
        self.canceled = False
        self._callbacks = {KEY_ENTERED_EVENT: [], READY_EVENT: []}

        # Events are always delivered from the event loop, never from inside
        # the call that created the query.
        asyncio.get_running_loop().call_soon(self._deliver)

    def on(self, event: str, callback: Callable) -> None:
        if event not in self._callbacks:
            raise ValueError(f"Unsupported query event {event}")
        self._callbacks[event].append(callback)

    def cancel(self) -> None:
        if not self.canceled:
            self.canceled = True
            self.index.active_queries -= 1

    def _deliver(self) -> None:
        if self.canceled:
            return
        for match in self.index.within(self.center, self.radius_km):
            for callback in self._callbacks[KEY_ENTERED_EVENT]:
                callback(match.key, match.location.as_pair())
        for callback in self._callbacks[READY_EVENT]:
            callback()


class InMemoryIndex:
    """
    An event-style point index held in memory.

    Candidates are found with a shapely STRtree over a lon/lat bounding box
    of the query circle, then confirmed with the great-circle distance.
    """

    def __init__(self, entries: Optional[Dict[str, Point]] = None):
        self._locations: Dict[str, Point] = {}
        self._tree: Optional[STRtree] = None
        self._tree_keys: List[str] = []
        self.active_queries = 0
        for key, location in (entries or {}).items():
            self.set(key, location)

    def __len__(self):
        return len(self._locations)

    def __contains__(self, key):
        return key in self._locations

    def set(self, key: str, location) -> None:
        self._locations[key] = Point.from_pair(location)
        self._tree = None

    def remove(self, key: str) -> None:
        del self._locations[key]
        self._tree = None

    def query(self, center: Point, radius_km: float) -> InMemoryQuery:
        query = InMemoryQuery(self, center, radius_km)
        self.active_queries += 1
        return query

    def within(self, center: Point, radius_km: float) -> List[IndexMatch]:
        """Entries no further than radius_km from center."""
        radius_m = radius_km * METERS_PER_KILOMETER
        return [
            IndexMatch(key, self._locations[key])
            for key in self._candidates(center, radius_m)
            if geometry.distance(center, self._locations[key]) <= radius_m
        ]

    def _candidates(self, center: Point, radius_m: float) -> List[str]:
        if not self._locations:
            return []

        bounds = bounding_box(center, radius_m)
        if bounds is None:
            return list(self._locations)

        if self._tree is None:
            self._tree_keys = list(self._locations)
            self._tree = STRtree(
                [ShapelyPoint(self._locations[k].as_lonlat()) for k in self._tree_keys]
            )
            logger.debug(f"Built spatial index over {len(self._tree_keys)} points")
        return [self._tree_keys[i] for i in sorted(self._tree.query(box(*bounds)))]


def bounding_box(
    center: Point, radius_m: float
) -> Optional[Tuple[float, float, float, float]]:
    """
    A (min_lon, min_lat, max_lon, max_lat) box enclosing the circle, or None
    when the circle reaches a pole or crosses the antimeridian.
    """
    dlat = math.degrees(radius_m / EARTH_RADIUS_M)
    max_abs_lat = abs(center.latitude) + dlat
    if max_abs_lat >= 90:
        return None

    dlon = BBOX_MARGIN * dlat / math.cos(math.radians(max_abs_lat))
    min_lon = center.longitude - dlon
    max_lon = center.longitude + dlon
    if min_lon < -180 or max_lon > 180:
        return None

    return (min_lon, center.latitude - dlat, max_lon, center.latitude + dlat)
