from __future__ import annotations

from typing import Sequence

from ..core.enums import EmailStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, stored_enum
from .model import EmailLog
from .repository import EmailLogRepository


class MySQLEmailLogRepository(EmailLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: int, student_id: int, subject: str, body: str, status: EmailStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO email_logs(user_id, student_id, subject, body, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), int(student_id), subject, body, status.value),
            )
            return int(cur.lastrowid)

    def list_for_student(self, student_id: int) -> Sequence[EmailLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, user_id, student_id, subject, body, status, sent_at
                FROM email_logs
                WHERE student_id=%s
                ORDER BY sent_at DESC, id DESC
                """,
                (int(student_id),),
            )
            return [
                EmailLog(
                    email_log_id=int(r["id"]),
                    user_id=int(r["user_id"]),
                    student_id=int(r["student_id"]),
                    subject=r["subject"],
                    body=r["body"],
                    status=stored_enum(EmailStatus, r["status"]),
                    sent_at=r.get("sent_at"),
                )
                for r in fetchall(cur)
            ]
