from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import EnrollmentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import Course, CourseInput
from .repository import CourseRepository

COURSE_COLUMNS = "id, user_id, name, description, color, start_date, end_date, is_active, created_at, updated_at"


def row_to_course(r: Dict[str, Any], prefix: str = "") -> Course:
    return Course(
        course_id=int(r[f"{prefix}id"]),
        user_id=int(r[f"{prefix}user_id"]),
        name=r[f"{prefix}name"],
        color=r.get(f"{prefix}color") or "",
        is_active=as_bool(r.get(f"{prefix}is_active")),
        description=r.get(f"{prefix}description"),
        start_date=r.get(f"{prefix}start_date"),
        end_date=r.get(f"{prefix}end_date"),
        created_at=r.get(f"{prefix}created_at"),
        updated_at=r.get(f"{prefix}updated_at"),
    )


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self, *, active_only: bool = False) -> Sequence[Course]:
        where = "WHERE is_active = 1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {COURSE_COLUMNS} FROM courses {where} ORDER BY created_at DESC, id DESC")
            return [row_to_course(r) for r in fetchall(cur)]

    def get_by_id(self, course_id: int) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {COURSE_COLUMNS} FROM courses WHERE id=%s", (int(course_id),))
            r = fetchone(cur)
            return row_to_course(r) if r else None

    def count_active_enrollments(self, course_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM enrollments WHERE course_id=%s AND status=%s",
                (int(course_id), EnrollmentStatus.ACTIVE.value),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def count_lessons(self, course_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM lessons WHERE course_id=%s", (int(course_id),))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def create(self, *, user_id: int, data: CourseInput) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO courses(user_id, name, description, color, start_date, end_date, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    data.name,
                    data.description,
                    data.color,
                    data.start_date,
                    data.end_date,
                    bool(data.is_active),
                ),
            )
            return int(cur.lastrowid)

    def update(self, *, course_id: int, data: CourseInput) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE courses
                SET name=%s, description=%s, color=%s, start_date=%s, end_date=%s, is_active=%s,
                    updated_at=CURRENT_TIMESTAMP
                WHERE id=%s
                """,
                (
                    data.name,
                    data.description,
                    data.color,
                    data.start_date,
                    data.end_date,
                    bool(data.is_active),
                    int(course_id),
                ),
            )
            return cur.rowcount > 0

    def set_active(self, *, course_id: int, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE courses SET is_active=%s WHERE id=%s", (bool(is_active), int(course_id)))
            return cur.rowcount > 0

    def delete(self, *, course_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM courses WHERE id=%s", (int(course_id),))
            return cur.rowcount > 0
