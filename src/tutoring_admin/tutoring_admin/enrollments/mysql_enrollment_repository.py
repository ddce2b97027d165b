from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import EnrollmentStatus
from ..courses.mysql_course_repository import row_to_course
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, stored_enum
from ..students.mysql_student_repository import row_to_student
from .model import Enrollment, EnrollmentWithCourse, EnrollmentWithStudent
from .repository import EnrollmentRepository

ENROLLMENT_COLUMNS = "e.id, e.user_id, e.student_id, e.course_id, e.status, e.enrolled_at, e.notes"


def row_to_enrollment(r: Dict[str, Any], prefix: str = "") -> Enrollment:
    return Enrollment(
        enrollment_id=int(r[f"{prefix}id"]),
        user_id=int(r[f"{prefix}user_id"]),
        student_id=int(r[f"{prefix}student_id"]),
        course_id=int(r[f"{prefix}course_id"]),
        status=stored_enum(EnrollmentStatus, r[f"{prefix}status"]),
        enrolled_at=r.get(f"{prefix}enrolled_at"),
        notes=r.get(f"{prefix}notes"),
    )


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_course(self, course_id: int) -> Sequence[EnrollmentWithStudent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {ENROLLMENT_COLUMNS},
                       s.id AS s_id, s.user_id AS s_user_id, s.full_name AS s_full_name,
                       s.email AS s_email, s.phone AS s_phone, s.notes AS s_notes,
                       s.created_at AS s_created_at, s.updated_at AS s_updated_at
                FROM enrollments e
                LEFT JOIN students s ON s.id = e.student_id
                WHERE e.course_id=%s
                ORDER BY e.enrolled_at DESC, e.id DESC
                """,
                (int(course_id),),
            )
            return [
                EnrollmentWithStudent(
                    enrollment=row_to_enrollment(r),
                    student=row_to_student(r, prefix="s_") if r.get("s_id") is not None else None,
                )
                for r in fetchall(cur)
            ]

    def list_for_student(self, student_id: int) -> Sequence[EnrollmentWithCourse]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {ENROLLMENT_COLUMNS},
                       c.id AS c_id, c.user_id AS c_user_id, c.name AS c_name,
                       c.description AS c_description, c.color AS c_color,
                       c.start_date AS c_start_date, c.end_date AS c_end_date,
                       c.is_active AS c_is_active, c.created_at AS c_created_at,
                       c.updated_at AS c_updated_at
                FROM enrollments e
                LEFT JOIN courses c ON c.id = e.course_id
                WHERE e.student_id=%s
                ORDER BY e.enrolled_at DESC, e.id DESC
                """,
                (int(student_id),),
            )
            return [
                EnrollmentWithCourse(
                    enrollment=row_to_enrollment(r),
                    course=row_to_course(r, prefix="c_") if r.get("c_id") is not None else None,
                )
                for r in fetchall(cur)
            ]

    def student_ids_in_course(self, course_id: int) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id FROM enrollments WHERE course_id=%s", (int(course_id),))
            return {int(r["student_id"]) for r in fetchall(cur)}

    def create(self, *, user_id: int, course_id: int, student_id: int, notes: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO enrollments(user_id, course_id, student_id, notes, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), int(course_id), int(student_id), notes, EnrollmentStatus.ACTIVE.value),
            )
            return int(cur.lastrowid)

    def create_many(self, *, user_id: int, course_id: int, student_ids: Sequence[int]) -> int:
        rows = [(int(user_id), int(course_id), int(sid), EnrollmentStatus.ACTIVE.value) for sid in student_ids]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                "INSERT INTO enrollments(user_id, course_id, student_id, status) VALUES(%s,%s,%s,%s)",
                rows,
            )
            return len(rows)

    def update_status(self, *, enrollment_id: int, status: EnrollmentStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE enrollments SET status=%s WHERE id=%s", (status.value, int(enrollment_id)))
            return cur.rowcount > 0

    def delete(self, *, enrollment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM enrollments WHERE id=%s", (int(enrollment_id),))
            return cur.rowcount > 0
