from __future__ import annotations

from typing import AbstractSet, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import StudentPlacement
from .repository import DirectoryRepository


class MySQLDirectoryRepository(DirectoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _ids(self, sql: str, params: tuple, column: str) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return {int(r[column]) for r in fetchall(cur)}

    def list_active_student_ids(self) -> set[int]:
        return self._ids("SELECT student_id FROM students WHERE is_active=1", (), "student_id")

    def list_student_ids_in_sections(self, section_ids: AbstractSet[int]) -> set[int]:
        if not section_ids:
            return set()
        ids = tuple(int(s) for s in section_ids)
        return self._ids(
            f"SELECT student_id FROM students WHERE is_active=1 AND section_id IN ({in_clause(ids)})",
            ids,
            "student_id",
        )

    def list_section_ids_for_courses(self, course_ids: AbstractSet[int]) -> set[int]:
        if not course_ids:
            return set()
        ids = tuple(int(c) for c in course_ids)
        return self._ids(f"SELECT section_id FROM sections WHERE course_id IN ({in_clause(ids)})", ids, "section_id")

    def list_course_ids_for_clusters(self, cluster_ids: AbstractSet[int]) -> set[int]:
        if not cluster_ids:
            return set()
        ids = tuple(int(c) for c in cluster_ids)
        return self._ids(f"SELECT course_id FROM courses WHERE cluster_id IN ({in_clause(ids)})", ids, "course_id")

    def get_placement(self, student_id: int) -> Optional[StudentPlacement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT st.student_id, st.is_active, se.section_id, co.course_id, co.cluster_id
                FROM students st
                LEFT JOIN sections se ON se.section_id = st.section_id
                LEFT JOIN courses co ON co.course_id = se.course_id
                WHERE st.student_id=%s
                """,
                (int(student_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return StudentPlacement(
                student_id=int(r["student_id"]),
                section_id=r.get("section_id"),
                course_id=r.get("course_id"),
                cluster_id=r.get("cluster_id"),
                is_active=bool(r["is_active"]),
            )
