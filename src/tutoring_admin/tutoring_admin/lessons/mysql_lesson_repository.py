from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..courses.mysql_course_repository import row_to_course
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Lesson, LessonInput, LessonWithCourse
from .repository import LessonRepository

LESSON_COLUMNS = (
    "l.id, l.user_id, l.course_id, l.title, l.description, l.lesson_date, "
    "l.duration_minutes, l.location, l.created_at, l.updated_at"
)
JOINED_COURSE_COLUMNS = (
    "c.id AS c_id, c.user_id AS c_user_id, c.name AS c_name, c.description AS c_description, "
    "c.color AS c_color, c.start_date AS c_start_date, c.end_date AS c_end_date, "
    "c.is_active AS c_is_active, c.created_at AS c_created_at, c.updated_at AS c_updated_at"
)


def row_to_lesson(r: Dict[str, Any], prefix: str = "") -> Lesson:
    return Lesson(
        lesson_id=int(r[f"{prefix}id"]),
        user_id=int(r[f"{prefix}user_id"]),
        course_id=int(r[f"{prefix}course_id"]),
        title=r[f"{prefix}title"],
        lesson_date=r[f"{prefix}lesson_date"],
        duration_minutes=int(r.get(f"{prefix}duration_minutes") or 60),
        description=r.get(f"{prefix}description"),
        location=r.get(f"{prefix}location"),
        created_at=r.get(f"{prefix}created_at"),
        updated_at=r.get(f"{prefix}updated_at"),
    )


def _row_to_lesson_with_course(r: Dict[str, Any]) -> LessonWithCourse:
    course = row_to_course(r, prefix="c_") if r.get("c_id") is not None else None
    return LessonWithCourse(lesson=row_to_lesson(r), course=course)


class MySQLLessonRepository(LessonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_course(self, course_id: int) -> Sequence[Lesson]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {LESSON_COLUMNS} FROM lessons l WHERE l.course_id=%s ORDER BY l.lesson_date ASC",
                (int(course_id),),
            )
            return [row_to_lesson(r) for r in fetchall(cur)]

    def get_by_id(self, lesson_id: int) -> Optional[Lesson]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {LESSON_COLUMNS} FROM lessons l WHERE l.id=%s", (int(lesson_id),))
            r = fetchone(cur)
            return row_to_lesson(r) if r else None

    def get_with_course(self, lesson_id: int) -> Optional[LessonWithCourse]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {LESSON_COLUMNS}, {JOINED_COURSE_COLUMNS}
                FROM lessons l
                LEFT JOIN courses c ON c.id = l.course_id
                WHERE l.id=%s
                """,
                (int(lesson_id),),
            )
            r = fetchone(cur)
            return _row_to_lesson_with_course(r) if r else None

    def list_upcoming(self, *, after: datetime, limit: int) -> Sequence[LessonWithCourse]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {LESSON_COLUMNS}, {JOINED_COURSE_COLUMNS}
                FROM lessons l
                LEFT JOIN courses c ON c.id = l.course_id
                WHERE l.lesson_date >= %s
                ORDER BY l.lesson_date ASC
                LIMIT %s
                """,
                (after, int(limit)),
            )
            return [_row_to_lesson_with_course(r) for r in fetchall(cur)]

    def create(self, *, user_id: int, course_id: int, data: LessonInput) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO lessons(user_id, course_id, title, description, lesson_date, duration_minutes, location)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    int(course_id),
                    data.title,
                    data.description,
                    data.lesson_date,
                    int(data.duration_minutes),
                    data.location,
                ),
            )
            return int(cur.lastrowid)

    def update(self, *, lesson_id: int, data: LessonInput) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE lessons
                SET title=%s, description=%s, lesson_date=%s, duration_minutes=%s, location=%s,
                    updated_at=CURRENT_TIMESTAMP
                WHERE id=%s
                """,
                (
                    data.title,
                    data.description,
                    data.lesson_date,
                    int(data.duration_minutes),
                    data.location,
                    int(lesson_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, *, lesson_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM lessons WHERE id=%s", (int(lesson_id),))
            return cur.rowcount > 0
