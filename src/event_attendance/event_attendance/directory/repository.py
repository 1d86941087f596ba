from __future__ import annotations

from typing import AbstractSet, Optional, Protocol

from .model import StudentPlacement


class DirectoryRepository(Protocol):
    """Read-only view of the organizational hierarchy.

    Student lookups only ever return active students.
    """

    def list_active_student_ids(self) -> set[int]:
        raise NotImplementedError

    def list_student_ids_in_sections(self, section_ids: AbstractSet[int]) -> set[int]:
        raise NotImplementedError

    def list_section_ids_for_courses(self, course_ids: AbstractSet[int]) -> set[int]:
        raise NotImplementedError

    def list_course_ids_for_clusters(self, cluster_ids: AbstractSet[int]) -> set[int]:
        raise NotImplementedError

    def get_placement(self, student_id: int) -> Optional[StudentPlacement]:
        raise NotImplementedError
