"""Point containment against event geofences.

All functions here are pure and safe to call from any number of threads.

Points lying exactly on a boundary edge count as inside. That applies to hole
edges too: a point on a hole's edge sits on the polygon's boundary.
"""
from __future__ import annotations

import math

from ..common.validators import require_coordinates
from ..core.constants import EARTH_RADIUS_METERS
from ..core.exceptions import ValidationError
from .model import Boundary, Circle, GeoPoint, Polygon, Ring

# Tolerance (in degrees) for on-edge detection.
_EDGE_EPSILON = 1e-12


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points, in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def _on_segment(lat: float, lon: float, a: GeoPoint, b: GeoPoint) -> bool:
    x, y = lon, lat
    x1, y1 = a.longitude, a.latitude
    x2, y2 = b.longitude, b.latitude

    cross = (x2 - x1) * (y - y1) - (y2 - y1) * (x - x1)
    if abs(cross) > _EDGE_EPSILON:
        return False
    return (
        min(x1, x2) - _EDGE_EPSILON <= x <= max(x1, x2) + _EDGE_EPSILON
        and min(y1, y2) - _EDGE_EPSILON <= y <= max(y1, y2) + _EDGE_EPSILON
    )


def _on_ring_edge(lat: float, lon: float, ring: Ring) -> bool:
    n = len(ring)
    return any(_on_segment(lat, lon, ring[i], ring[(i + 1) % n]) for i in range(n))


def _ray_cast(lat: float, lon: float, ring: Ring) -> bool:
    # x = longitude, y = latitude
    inside = False
    n = len(ring)
    j = n - 1
    for i in range(n):
        xi, yi = ring[i].longitude, ring[i].latitude
        xj, yj = ring[j].longitude, ring[j].latitude
        if (yi > lat) != (yj > lat) and lon < (xj - xi) * (lat - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def _polygon_contains(polygon: Polygon, lat: float, lon: float) -> bool:
    outer = polygon.outer
    if not (_on_ring_edge(lat, lon, outer) or _ray_cast(lat, lon, outer)):
        return False
    for hole in polygon.holes:
        if _on_ring_edge(lat, lon, hole):
            return True
        if _ray_cast(lat, lon, hole):
            return False
    return True


def contains(boundary: Boundary, latitude: float, longitude: float) -> bool:
    lat, lon = require_coordinates(latitude, longitude)

    if isinstance(boundary, Circle):
        distance = haversine_meters(lat, lon, boundary.center.latitude, boundary.center.longitude)
        return distance <= boundary.radius_meters

    if isinstance(boundary, Polygon):
        return _polygon_contains(boundary, lat, lon)

    raise ValidationError(f"Unsupported boundary: {type(boundary).__name__}")
