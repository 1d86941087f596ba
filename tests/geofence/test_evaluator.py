from __future__ import annotations

import pytest

from src.event_attendance.event_attendance.core.exceptions import ValidationError
from src.event_attendance.event_attendance.geofence.evaluator import contains, haversine_meters
from src.event_attendance.event_attendance.geofence.model import (
    Circle,
    GeoPoint,
    Polygon,
    boundary_from_geojson,
    boundary_to_geojson,
)

QUAD = Circle(GeoPoint(14.1498, 120.9555), 50)


def _square(lo: float, hi: float) -> tuple[GeoPoint, ...]:
    return (GeoPoint(lo, lo), GeoPoint(lo, hi), GeoPoint(hi, hi), GeoPoint(hi, lo))


def test_haversine_one_degree_of_latitude():
    assert haversine_meters(0, 0, 1, 0) == pytest.approx(111_195, rel=1e-3)
    assert haversine_meters(14.1498, 120.9555, 14.1498, 120.9555) == 0


def test_circle_point_ten_meters_away_is_inside():
    assert contains(QUAD, 14.1499, 120.9555) is True


def test_circle_point_two_hundred_meters_away_is_outside():
    assert contains(QUAD, 14.1516, 120.9555) is False


def test_circle_rejects_non_positive_radius():
    with pytest.raises(ValidationError):
        Circle(GeoPoint(0, 0), 0)
    with pytest.raises(ValidationError):
        Circle(GeoPoint(0, 0), -5)


def test_polygon_interior_and_exterior():
    square = Polygon(rings=(_square(0.0, 1.0),))
    assert contains(square, 0.5, 0.5) is True
    assert contains(square, 0.5, 1.5) is False
    assert contains(square, -0.1, 0.5) is False


def test_point_on_polygon_edge_or_vertex_is_inside():
    square = Polygon(rings=(_square(0.0, 1.0),))
    assert contains(square, 0.0, 0.5) is True
    assert contains(square, 1.0, 1.0) is True


def test_polygon_hole_excludes_interior_but_not_its_edge():
    with_hole = Polygon(rings=(_square(0.0, 1.0), _square(0.25, 0.75)))
    assert contains(with_hole, 0.5, 0.5) is False
    assert contains(with_hole, 0.1, 0.1) is True
    assert contains(with_hole, 0.25, 0.5) is True


def test_polygon_with_fewer_than_three_points_is_rejected():
    with pytest.raises(ValidationError):
        Polygon(rings=((GeoPoint(0, 0), GeoPoint(1, 1)),))


def test_closing_point_does_not_count_towards_minimum():
    a, b = GeoPoint(0, 0), GeoPoint(1, 1)
    with pytest.raises(ValidationError):
        Polygon(rings=((a, b, a),))

    closed = Polygon(rings=((GeoPoint(0, 0), GeoPoint(0, 1), GeoPoint(1, 1), GeoPoint(0, 0)),))
    assert len(closed.outer) == 3


def test_out_of_range_coordinates_are_rejected():
    with pytest.raises(ValidationError):
        contains(QUAD, 91.0, 0.0)
    with pytest.raises(ValidationError):
        contains(QUAD, 0.0, float("nan"))


def test_geojson_polygon_uses_lon_lat_order():
    boundary = boundary_from_geojson(
        {"type": "Polygon", "coordinates": [[[120.0, 14.0], [121.0, 14.0], [121.0, 15.0], [120.0, 15.0], [120.0, 14.0]]]}
    )
    assert isinstance(boundary, Polygon)
    assert contains(boundary, 14.5, 120.5) is True
    assert contains(boundary, 15.5, 120.5) is False


def test_geojson_circle_round_trip():
    data = {"type": "Circle", "center": [120.9555, 14.1498], "radius": 50.0}
    boundary = boundary_from_geojson(data)
    assert boundary == QUAD
    assert boundary_to_geojson(boundary) == data


def test_geojson_unknown_type_is_rejected():
    with pytest.raises(ValidationError):
        boundary_from_geojson({"type": "Hexagon"})
