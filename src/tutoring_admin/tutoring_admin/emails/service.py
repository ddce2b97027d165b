from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core import invalidation
from ..core.enums import EmailStatus
from ..core.exceptions import EmailDeliveryError, PersistenceError
from ..core.identity import CurrentUser
from ..core.invalidation import ViewInvalidator
from ..students.repository import StudentRepository
from .model import EmailLog, SendEmailResult
from .repository import EmailLogRepository
from .transport import EmailTransport

logger = logging.getLogger(__name__)


class EmailService:
    """Use case: email a student and keep an audit log of every attempt.

    Failures are reported through ``SendEmailResult`` instead of raising, so
    the sending form can show the reason inline.
    """

    def __init__(
        self,
        logs: EmailLogRepository,
        students: StudentRepository,
        transport: EmailTransport,
        invalidator: ViewInvalidator,
    ):
        self._logs = logs
        self._students = students
        self._transport = transport
        self._invalidator = invalidator

    def send_student_email(
        self,
        user: Optional[CurrentUser],
        student_id: int,
        *,
        subject: Optional[str],
        body: Optional[str],
    ) -> SendEmailResult:
        if user is None:
            return SendEmailResult(success=False, error="You must be logged in to send emails")

        subject = (subject or "").strip()
        body = body or ""
        if not subject or not body.strip():
            return SendEmailResult(success=False, error="Subject and message are required")

        try:
            student = self._students.get_by_id(int(student_id))
        except PersistenceError:
            logger.exception("Error fetching student id=%s for email", student_id)
            student = None
        if not student:
            return SendEmailResult(success=False, error="Student not found")

        status = EmailStatus.SENT
        error: Optional[str] = None
        try:
            self._transport.send(to=student.email, subject=subject, body=body)
        except EmailDeliveryError as e:
            status = EmailStatus.FAILED
            error = str(e) or "Failed to send email"

        try:
            self._logs.create(
                user_id=user.id,
                student_id=student.student_id,
                subject=subject,
                body=body,
                status=status,
            )
        except PersistenceError:
            logger.exception("Error logging email for student id=%s", student_id)

        self._invalidator.invalidate(invalidation.student_detail(student.student_id))

        if status == EmailStatus.FAILED:
            return SendEmailResult(success=False, error=error)
        return SendEmailResult(success=True)

    def get_email_logs(self, student_id: int) -> Sequence[EmailLog]:
        try:
            return list(self._logs.list_for_student(int(student_id)))
        except PersistenceError:
            logger.exception("Error fetching email logs for student id=%s", student_id)
            return []
