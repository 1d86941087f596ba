from __future__ import annotations

import logging

from ..directory.repository import DirectoryRepository
from ..events.model import EligibilityCriteria

logger = logging.getLogger(__name__)


class EligibilityResolver:
    """Turns eligibility criteria into the set of students expected to attend."""

    def __init__(self, directory: DirectoryRepository):
        self._directory = directory

    def resolve_audience(self, criteria: EligibilityCriteria) -> set[int]:
        if criteria.all_students:
            return set(self._directory.list_active_student_ids())

        section_ids = set(criteria.section_ids)
        if criteria.course_ids:
            section_ids |= self._directory.list_section_ids_for_courses(criteria.course_ids)
        if criteria.cluster_ids:
            course_ids = self._directory.list_course_ids_for_clusters(criteria.cluster_ids)
            if course_ids:
                section_ids |= self._directory.list_section_ids_for_courses(course_ids)

        if not section_ids:
            logger.info("Eligibility criteria %s matched no sections", criteria.to_dict())
            return set()
        return set(self._directory.list_student_ids_in_sections(section_ids))

    def is_eligible(self, student_id: int, criteria: EligibilityCriteria) -> bool:
        placement = self._directory.get_placement(student_id)
        if placement is None or not placement.is_active:
            return False
        if criteria.all_students:
            return True
        if placement.section_id is not None and placement.section_id in criteria.section_ids:
            return True
        if placement.course_id is not None and placement.course_id in criteria.course_ids:
            return True
        return placement.cluster_id is not None and placement.cluster_id in criteria.cluster_ids
