from __future__ import annotations

import math
from typing import Any

from ..core.exceptions import ValidationError


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if number <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return number


def require_coordinates(latitude: Any, longitude: Any) -> tuple[float, float]:
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise ValidationError("latitude and longitude must be numbers")
    if math.isnan(lat) or math.isnan(lon):
        raise ValidationError("latitude and longitude must be numbers")
    if not -90.0 <= lat <= 90.0:
        raise ValidationError(f"latitude out of range: {lat}")
    if not -180.0 <= lon <= 180.0:
        raise ValidationError(f"longitude out of range: {lon}")
    return lat, lon
