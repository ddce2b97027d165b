from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import AttendanceStatus, EnrollmentStatus
from ..courses.mysql_course_repository import row_to_course
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, stored_enum
from ..enrollments.mysql_enrollment_repository import row_to_enrollment
from ..lessons.mysql_lesson_repository import row_to_lesson
from ..students.mysql_student_repository import row_to_student
from .model import AttendanceDetail, AttendanceMark, AttendanceRecord, RosterEntry
from .repository import AttendanceRepository


def _aliased(table: str, prefix: str, columns: Sequence[str]) -> str:
    return ", ".join(f"{table}.{c} AS {prefix}{c}" for c in columns)


_ATTENDANCE_COLS = ("id", "user_id", "enrollment_id", "lesson_id", "status", "notes", "marked_at")
_ENROLLMENT_COLS = ("id", "user_id", "student_id", "course_id", "status", "enrolled_at", "notes")
_STUDENT_COLS = ("id", "user_id", "full_name", "email", "phone", "notes", "created_at", "updated_at")
_COURSE_COLS = (
    "id", "user_id", "name", "description", "color", "start_date", "end_date",
    "is_active", "created_at", "updated_at",
)
_LESSON_COLS = (
    "id", "user_id", "course_id", "title", "description", "lesson_date",
    "duration_minutes", "location", "created_at", "updated_at",
)

_DETAIL_SELECT = f"""
    SELECT {_aliased("a", "a_", _ATTENDANCE_COLS)},
           {_aliased("e", "e_", _ENROLLMENT_COLS)},
           {_aliased("s", "s_", _STUDENT_COLS)},
           {_aliased("c", "c_", _COURSE_COLS)},
           {_aliased("l", "l_", _LESSON_COLS)}
    FROM attendance a
    LEFT JOIN enrollments e ON e.id = a.enrollment_id
    LEFT JOIN students s ON s.id = e.student_id
    LEFT JOIN courses c ON c.id = e.course_id
    LEFT JOIN lessons l ON l.id = a.lesson_id
"""


def row_to_attendance(r: Dict[str, Any], prefix: str = "") -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r[f"{prefix}id"]),
        user_id=int(r[f"{prefix}user_id"]),
        enrollment_id=int(r[f"{prefix}enrollment_id"]),
        lesson_id=int(r[f"{prefix}lesson_id"]),
        status=stored_enum(AttendanceStatus, r[f"{prefix}status"]),
        marked_at=r[f"{prefix}marked_at"],
        notes=r.get(f"{prefix}notes"),
    )


def _row_to_detail(r: Dict[str, Any]) -> AttendanceDetail:
    return AttendanceDetail(
        record=row_to_attendance(r, prefix="a_"),
        enrollment=row_to_enrollment(r, prefix="e_") if r.get("e_id") is not None else None,
        student=row_to_student(r, prefix="s_") if r.get("s_id") is not None else None,
        course=row_to_course(r, prefix="c_") if r.get("c_id") is not None else None,
        lesson=row_to_lesson(r, prefix="l_") if r.get("l_id") is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_roster(self, *, course_id: int, lesson_id: int) -> Sequence[RosterEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_aliased("e", "e_", _ENROLLMENT_COLS)},
                       {_aliased("s", "s_", _STUDENT_COLS)},
                       {_aliased("a", "a_", _ATTENDANCE_COLS)}
                FROM enrollments e
                LEFT JOIN students s ON s.id = e.student_id
                LEFT JOIN attendance a ON a.enrollment_id = e.id AND a.lesson_id = %s
                WHERE e.course_id = %s AND e.status = %s
                ORDER BY s.full_name ASC, e.id ASC
                """,
                (int(lesson_id), int(course_id), EnrollmentStatus.ACTIVE.value),
            )
            rows = fetchall(cur)
            return [
                RosterEntry(
                    enrollment=row_to_enrollment(r, prefix="e_"),
                    student=row_to_student(r, prefix="s_") if r.get("s_id") is not None else None,
                    attendance=(row_to_attendance(r, prefix="a_"),) if r.get("a_id") is not None else (),
                )
                for r in rows
            ]

    def upsert_many(
        self,
        *,
        user_id: int,
        lesson_id: int,
        marks: Sequence[AttendanceMark],
        marked_at: datetime,
    ) -> int:
        rows = [
            (int(user_id), int(lesson_id), int(m.enrollment_id), m.status.value, m.notes, marked_at)
            for m in marks
        ]
        if not rows:
            return 0

        # One statement batch in one transaction: the whole submission commits or none of it.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance(user_id, lesson_id, enrollment_id, status, notes, marked_at)
                VALUES(%s,%s,%s,%s,%s,%s) AS new
                ON DUPLICATE KEY UPDATE
                    user_id=new.user_id, status=new.status,
                    notes=new.notes, marked_at=new.marked_at
                """,
                rows,
            )
            return len(rows)

    def list_detailed(self, *, status: Optional[AttendanceStatus] = None) -> Sequence[AttendanceDetail]:
        where = ""
        params: List[object] = []
        if status is not None:
            where = "WHERE a.status = %s"
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_DETAIL_SELECT} {where} ORDER BY a.marked_at DESC, a.id DESC", tuple(params))
            return [_row_to_detail(r) for r in fetchall(cur)]

    def list_statuses(self, *, course_id: Optional[int] = None, student_id: Optional[int] = None) -> Sequence[Optional[str]]:
        clauses = ["1=1"]
        params: List[object] = []
        if course_id is not None:
            clauses.append("e.course_id=%s")
            params.append(int(course_id))
        if student_id is not None:
            clauses.append("e.student_id=%s")
            params.append(int(student_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.status
                FROM attendance a
                JOIN enrollments e ON e.id = a.enrollment_id
                WHERE {where}
                """,
                tuple(params),
            )
            return [r.get("status") for r in fetchall(cur)]

    def list_for_student(self, student_id: int) -> Sequence[AttendanceDetail]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_DETAIL_SELECT} WHERE e.student_id = %s ORDER BY a.marked_at DESC, a.id DESC",
                (int(student_id),),
            )
            return [_row_to_detail(r) for r in fetchall(cur)]
