from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student, StudentInput
from .repository import StudentRepository

STUDENT_COLUMNS = "id, user_id, full_name, email, phone, notes, created_at, updated_at"


def row_to_student(r: Dict[str, Any], prefix: str = "") -> Student:
    return Student(
        student_id=int(r[f"{prefix}id"]),
        user_id=int(r[f"{prefix}user_id"]),
        full_name=r[f"{prefix}full_name"],
        email=r[f"{prefix}email"],
        phone=r.get(f"{prefix}phone"),
        notes=r.get(f"{prefix}notes"),
        created_at=r.get(f"{prefix}created_at"),
        updated_at=r.get(f"{prefix}updated_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {STUDENT_COLUMNS} FROM students ORDER BY created_at DESC, id DESC")
            return [row_to_student(r) for r in fetchall(cur)]

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {STUDENT_COLUMNS} FROM students WHERE id=%s", (int(student_id),))
            r = fetchone(cur)
            return row_to_student(r) if r else None

    def create(self, *, user_id: int, data: StudentInput) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(user_id, full_name, email, phone, notes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), data.full_name, data.email, data.phone, data.notes),
            )
            return int(cur.lastrowid)

    def update(self, *, student_id: int, data: StudentInput, updated_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET full_name=%s, email=%s, phone=%s, notes=%s, updated_at=%s
                WHERE id=%s
                """,
                (data.full_name, data.email, data.phone, data.notes, updated_at, int(student_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE id=%s", (int(student_id),))
            return cur.rowcount > 0
