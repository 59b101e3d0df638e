"""
Reading analysis inputs and writing results.

Indexed points come from a CSV file with key, latitude and longitude
columns. Legs come from a JSON file holding either a list of legs, each a
list of [latitude, longitude] pairs, or GeoJSON line geometries. Results
are written as a GeoJSON FeatureCollection.
"""

import json
import logging
from typing import List

import pandas as pd
from shapely.geometry import LineString, MultiLineString, mapping, shape
from shapely.geometry import Point as ShapelyPoint

from nsidc.linebuffer import constants
from nsidc.linebuffer.index import InMemoryIndex
from nsidc.linebuffer.models import LegResult, Point

logger = logging.getLogger(__name__)


def load_index(csv_path: str) -> InMemoryIndex:
    df = pd.read_csv(csv_path, dtype={constants.KEY_COLUMN: str})

    required = [
        constants.KEY_COLUMN,
        constants.LATITUDE_COLUMN,
        constants.LONGITUDE_COLUMN,
    ]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{csv_path} is missing columns: {', '.join(missing)}")

    index = InMemoryIndex()
    for key, lat, lon in zip(
        df[constants.KEY_COLUMN],
        df[constants.LATITUDE_COLUMN],
        df[constants.LONGITUDE_COLUMN],
    ):
        index.set(key, Point(float(lat), float(lon)))

    logger.debug(f"Loaded {len(index)} indexed points from {csv_path}")
    return index


def load_legs(json_path: str) -> List[List[Point]]:
    with open(json_path) as f:
        content = json.load(f)
    return legs_from_json(content)


def legs_from_json(content) -> List[List[Point]]:
    """
    Legs from a list of [lat, lng] polylines, or from a GeoJSON
    FeatureCollection, Feature or geometry.
    """
    if isinstance(content, list):
        return [[Point.from_pair(p) for p in leg] for leg in content]

    if not isinstance(content, dict):
        raise ValueError("Legs must be a list of polylines or a GeoJSON object")

    if content.get("type") == "FeatureCollection":
        return [
            leg
            for feature in content.get("features", [])
            for leg in legs_from_json(feature)
        ]
    if content.get("type") == "Feature":
        return legs_from_json(content["geometry"])

    return _legs_from_geometry(shape(content))


def _legs_from_geometry(geom) -> List[List[Point]]:
    def leg(coords):
        return [Point(lat, lon) for lon, lat, *_ in coords]

    if isinstance(geom, (LineString, ShapelyPoint)):
        return [leg(geom.coords)]
    if isinstance(geom, MultiLineString):
        return [leg(line.coords) for line in geom.geoms]
    raise ValueError(f"Unsupported leg geometry {geom.geom_type}")


def to_feature_collection(results: List[LegResult]) -> dict:
    """
    One feature per leg for its query polyline, followed by one feature per
    matched point. A point matched by several legs is written once, for the
    first leg that found it.
    """
    features = []
    seen = set()

    for n, result in enumerate(results):
        section = result.query_section
        features.append(
            {
                "type": "Feature",
                "geometry": mapping(section.as_linestring()),
                "properties": {
                    "leg": n,
                    "distance": section.distance,
                    "match_count": len(result.matches),
                },
            }
        )

    for n, result in enumerate(results):
        for key, match in result.matches.items():
            if key in seen:
                continue
            seen.add(key)
            features.append(
                {
                    "type": "Feature",
                    "geometry": mapping(ShapelyPoint(match.location.as_lonlat())),
                    "properties": {"key": key, "leg": n},
                }
            )

    return {"type": "FeatureCollection", "features": features}


def write_results(results: List[LegResult], output_path: str) -> None:
    with open(output_path, "w") as f:
        json.dump(to_feature_collection(results), f, indent=2)
    logger.debug(f"Wrote results to {output_path}")
