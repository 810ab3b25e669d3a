# geo_utils.py
# Pure mathematical / geographic helper functions.
# No side effects; depends only on models.

import math
from typing import Sequence, Tuple

from shapely.geometry import MultiPoint, Point
from shapely.geometry.base import BaseGeometry

from .models import Coord, CoordRegion, MapRect


EARTH_RADIUS_M = 6_371_000.0

# Web-Mercator world edge length in map points (zoom level 20 of 256px tiles).
MAP_WORLD_SIZE = 268_435_456.0

MAX_MERCATOR_LAT = 85.05112878

METERS_PER_DEGREE_LAT = math.pi * EARTH_RADIUS_M / 180.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points in metres.

    Args:
        lat1, lon1: Origin in decimal degrees.
        lat2, lon2: Destination in decimal degrees.

    Returns:
        Distance in metres.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def project_to_map_point(coord: Coord) -> Tuple[float, float]:
    """
    Spherical-Mercator projection of a coordinate into map-point space.

    Args:
        coord: Geographic coordinate in decimal degrees.

    Returns:
        (x, y) with x growing east and y growing south, both in
        [0, MAP_WORLD_SIZE].
    """
    lat = max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, coord.lat))
    x = (coord.lon + 180.0) / 360.0 * MAP_WORLD_SIZE
    sin_lat = math.sin(math.radians(lat))
    y = (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * MAP_WORLD_SIZE
    return x, y


def map_point(coord: Coord) -> Point:
    return Point(project_to_map_point(coord))


def polyline_extent(polyline: Sequence[Coord]) -> BaseGeometry:
    """
    Envelope of a polyline in map-point space.

    A single coordinate yields a point, a straight horizontal or vertical
    run a line; anything else a rectangle polygon.
    """
    if not polyline:
        raise ValueError("polyline must contain at least one coordinate")
    return MultiPoint([project_to_map_point(c) for c in polyline]).envelope


def bounding_map_rect(coords: Sequence[Coord]) -> MapRect:
    """Smallest MapRect covering all coordinates."""
    if not coords:
        raise ValueError("coords must not be empty")
    return MapRect.from_bounds(MultiPoint([project_to_map_point(c) for c in coords]).bounds)


def region_around(center: Coord, span_m: float) -> CoordRegion:
    """Square region of span_m metres on each side centred on a coordinate."""
    lat_delta = span_m / METERS_PER_DEGREE_LAT
    cos_lat = math.cos(math.radians(center.lat))
    lon_delta = lat_delta / cos_lat if cos_lat > 1e-9 else 360.0
    return CoordRegion(center=center, lat_delta=lat_delta, lon_delta=min(lon_delta, 360.0))
