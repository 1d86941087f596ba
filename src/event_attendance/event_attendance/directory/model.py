from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StudentPlacement:
    """Read-model: where a student sits in the section -> course -> cluster hierarchy."""

    student_id: int
    section_id: Optional[int]
    course_id: Optional[int]
    cluster_id: Optional[int]
    is_active: bool = True
