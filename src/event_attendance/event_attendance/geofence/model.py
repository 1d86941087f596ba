from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Union

from ..common.validators import require_coordinates
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def __post_init__(self):
        lat, lon = require_coordinates(self.latitude, self.longitude)
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)


@dataclass(frozen=True)
class Circle:
    center: GeoPoint
    radius_meters: float

    def __post_init__(self):
        try:
            radius = float(self.radius_meters)
        except (TypeError, ValueError):
            raise ValidationError("Circle radius must be a number")
        if not radius > 0:
            raise ValidationError(f"Circle radius must be positive, got {self.radius_meters!r}")
        object.__setattr__(self, "radius_meters", radius)


Ring = tuple[GeoPoint, ...]


def _normalize_ring(points: Sequence[GeoPoint], index: int) -> Ring:
    ring = tuple(points)
    # GeoJSON rings repeat the first point at the end.
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring = ring[:-1]
    if len(ring) < 3:
        raise ValidationError(f"Polygon ring {index} needs at least 3 points, got {len(ring)}")
    return ring


@dataclass(frozen=True)
class Polygon:
    """Outer ring first; any further rings are holes."""

    rings: tuple[Ring, ...]

    def __post_init__(self):
        if not self.rings:
            raise ValidationError("Polygon needs at least one ring")
        rings = tuple(_normalize_ring(r, i) for i, r in enumerate(self.rings))
        object.__setattr__(self, "rings", rings)

    @property
    def outer(self) -> Ring:
        return self.rings[0]

    @property
    def holes(self) -> tuple[Ring, ...]:
        return self.rings[1:]


Boundary = Union[Circle, Polygon]


def _point_from_pair(pair: Any) -> GeoPoint:
    # GeoJSON order: [longitude, latitude]
    if not isinstance(pair, (list, tuple)) or len(pair) < 2:
        raise ValidationError(f"Invalid coordinate pair: {pair!r}")
    return GeoPoint(latitude=pair[1], longitude=pair[0])


def boundary_from_geojson(data: dict) -> Boundary:
    """Build a boundary from its stored GeoJSON-like form.

    Supported shapes::

        {"type": "Circle", "center": [lon, lat], "radius": 50}
        {"type": "Polygon", "coordinates": [[[lon, lat], ...], ...]}
    """
    if not isinstance(data, dict):
        raise ValidationError("Boundary must be an object")

    kind = str(data.get("type") or "").strip().lower()
    if kind == "circle":
        if "center" not in data or "radius" not in data:
            raise ValidationError("Circle boundary requires center and radius")
        return Circle(center=_point_from_pair(data["center"]), radius_meters=data["radius"])

    if kind == "polygon":
        coordinates = data.get("coordinates")
        if not isinstance(coordinates, (list, tuple)) or not coordinates:
            raise ValidationError("Polygon boundary requires coordinates")
        rings = []
        for ring in coordinates:
            if not isinstance(ring, (list, tuple)):
                raise ValidationError("Polygon ring must be a list of coordinate pairs")
            rings.append(tuple(_point_from_pair(p) for p in ring))
        return Polygon(rings=tuple(rings))

    raise ValidationError(f"Unsupported boundary type: {data.get('type')!r}")


def boundary_to_geojson(boundary: Boundary) -> dict:
    if isinstance(boundary, Circle):
        return {
            "type": "Circle",
            "center": [boundary.center.longitude, boundary.center.latitude],
            "radius": boundary.radius_meters,
        }
    if isinstance(boundary, Polygon):
        coordinates = []
        for ring in boundary.rings:
            pairs = [[p.longitude, p.latitude] for p in ring]
            pairs.append(pairs[0])
            coordinates.append(pairs)
        return {"type": "Polygon", "coordinates": coordinates}
    raise ValidationError(f"Unsupported boundary: {type(boundary).__name__}")
