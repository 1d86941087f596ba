"""Presence ratio arithmetic over a record's ping log."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

from .model import LocationPing


def _clamp(value: datetime, start: datetime, end: datetime) -> datetime:
    return min(max(value, start), end)


def inside_duration(pings: Sequence[LocationPing], start: datetime, end: datetime) -> timedelta:
    """Time spent inside, attributing each gap to the state of the ping that opened it.

    Both ends of every gap are clamped into [start, end], so samples taken
    before the start or after the end only count for the overlap.
    """
    if len(pings) < 2:
        return timedelta(0)

    ordered = sorted(pings, key=lambda p: p.timestamp)
    total = timedelta(0)
    for current, following in zip(ordered, ordered[1:]):
        if current.inside:
            total += _clamp(following.timestamp, start, end) - _clamp(current.timestamp, start, end)
    return total


def inside_ratio(pings: Sequence[LocationPing], start: datetime, end: datetime) -> float:
    duration = end - start
    if duration <= timedelta(0):
        return 0.0
    return inside_duration(pings, start, end) / duration
