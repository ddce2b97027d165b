from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import clean_optional, require_fields
from ..core import invalidation
from ..core.exceptions import PersistenceError
from ..core.identity import CurrentUser, require_user
from ..core.invalidation import ViewInvalidator
from .model import Student, StudentInput
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def _student_input(full_name: Optional[str], email: Optional[str], phone: Optional[str], notes: Optional[str]) -> StudentInput:
    require_fields("Full name and email are required", full_name, email)
    return StudentInput(
        full_name=str(full_name).strip(),
        email=str(email).strip(),
        phone=clean_optional(phone),
        notes=clean_optional(notes),
    )


class StudentService:
    """Use cases: manage the student directory."""

    def __init__(self, students: StudentRepository, invalidator: ViewInvalidator):
        self._students = students
        self._invalidator = invalidator

    def list_students(self) -> Sequence[Student]:
        try:
            return list(self._students.list_all())
        except PersistenceError:
            logger.exception("Error fetching students")
            return []

    def get_student(self, student_id: int) -> Optional[Student]:
        try:
            return self._students.get_by_id(int(student_id))
        except PersistenceError:
            logger.exception("Error fetching student id=%s", student_id)
            return None

    def create_student(
        self,
        user: Optional[CurrentUser],
        *,
        full_name: Optional[str],
        email: Optional[str],
        phone: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        user = require_user(user, "create a student")
        data = _student_input(full_name, email, phone, notes)

        try:
            student_id = self._students.create(user_id=user.id, data=data)
        except PersistenceError:
            logger.exception("Error creating student")
            raise PersistenceError("Failed to create student")

        self._invalidator.invalidate(invalidation.DASHBOARD)
        return student_id

    def update_student(
        self,
        user: Optional[CurrentUser],
        student_id: int,
        *,
        full_name: Optional[str],
        email: Optional[str],
        phone: Optional[str] = None,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> None:
        require_user(user, "update a student")
        data = _student_input(full_name, email, phone, notes)

        try:
            self._students.update(student_id=int(student_id), data=data, updated_at=now or now_local())
        except PersistenceError:
            logger.exception("Error updating student id=%s", student_id)
            raise PersistenceError("Failed to update student")

        self._invalidator.invalidate(invalidation.DASHBOARD)
        self._invalidator.invalidate(invalidation.student_detail(int(student_id)))

    def delete_student(self, user: Optional[CurrentUser], student_id: int) -> None:
        require_user(user, "delete a student")
        try:
            self._students.delete(student_id=int(student_id))
        except PersistenceError:
            logger.exception("Error deleting student id=%s", student_id)
            raise PersistenceError("Failed to delete student")

        self._invalidator.invalidate(invalidation.DASHBOARD)
