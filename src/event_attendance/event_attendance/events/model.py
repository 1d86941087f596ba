from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from ..core.enums import EventStatus
from ..core.exceptions import ValidationError


def _id_set(values: Iterable[int]) -> frozenset[int]:
    return frozenset(int(v) for v in (values or ()))


@dataclass(frozen=True)
class EligibilityCriteria:
    """Who is expected to attend.

    Either every student, or the union of the listed sections, courses and
    clusters. Criteria that list nothing match nobody.
    """

    all_students: bool = False
    section_ids: frozenset[int] = frozenset()
    course_ids: frozenset[int] = frozenset()
    cluster_ids: frozenset[int] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "section_ids", _id_set(self.section_ids))
        object.__setattr__(self, "course_ids", _id_set(self.course_ids))
        object.__setattr__(self, "cluster_ids", _id_set(self.cluster_ids))

    @classmethod
    def everyone(cls) -> "EligibilityCriteria":
        return cls(all_students=True)

    @classmethod
    def from_dict(cls, data: dict | None) -> "EligibilityCriteria":
        if not data:
            return cls.everyone()
        return cls(
            all_students=bool(data.get("all_students", False)),
            section_ids=data.get("sections") or (),
            course_ids=data.get("courses") or (),
            cluster_ids=data.get("clusters") or (),
        )

    def to_dict(self) -> dict:
        return {
            "all_students": self.all_students,
            "sections": sorted(self.section_ids),
            "courses": sorted(self.course_ids),
            "clusters": sorted(self.cluster_ids),
        }


@dataclass(frozen=True)
class EventSession:
    """Domain entity: a scheduled event with its registration and venue geofences."""

    event_id: int
    name: str
    registration_location_id: int
    venue_location_id: int
    registration_open_at: datetime
    start_at: datetime
    end_at: datetime
    status: EventStatus = EventStatus.UPCOMING
    eligibility: EligibilityCriteria = field(default_factory=EligibilityCriteria.everyone)
    facial_verification_enabled: bool = False
    location_monitoring_enabled: bool = True
    strict_location_validation: bool = False

    def __post_init__(self):
        if self.registration_open_at > self.start_at:
            raise ValidationError("Registration must open before the event starts")
        if self.start_at > self.end_at:
            raise ValidationError("Event must end after it starts")
