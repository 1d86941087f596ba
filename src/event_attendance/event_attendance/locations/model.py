from __future__ import annotations

from dataclasses import dataclass

from ..geofence.model import Boundary


@dataclass(frozen=True)
class Location:
    """A named geofence (registration area or venue)."""

    location_id: int
    name: str
    boundary: Boundary
