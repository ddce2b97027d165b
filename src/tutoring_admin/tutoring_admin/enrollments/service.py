from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..common.validators import clean_optional, parse_int
from ..core import invalidation
from ..core.enums import EnrollmentStatus
from ..core.exceptions import PersistenceError, UniquenessViolation, ValidationError
from ..core.identity import CurrentUser, require_user
from ..core.invalidation import ViewInvalidator
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import EnrollmentWithCourse, EnrollmentWithStudent
from .repository import EnrollmentRepository

logger = logging.getLogger(__name__)

ALREADY_ENROLLED = "Student is already enrolled in this course"


class EnrollmentService:
    def __init__(self, enrollments: EnrollmentRepository, students: StudentRepository, invalidator: ViewInvalidator):
        self._enrollments = enrollments
        self._students = students
        self._invalidator = invalidator

    def _invalidate_course(self, course_id: int) -> None:
        self._invalidator.invalidate(invalidation.course_detail(course_id))
        self._invalidator.invalidate(invalidation.course_students(course_id))

    def list_by_course(self, course_id: int) -> Sequence[EnrollmentWithStudent]:
        try:
            return list(self._enrollments.list_for_course(int(course_id)))
        except PersistenceError:
            logger.exception("Error fetching enrollments for course id=%s", course_id)
            return []

    def list_by_student(self, student_id: int) -> Sequence[EnrollmentWithCourse]:
        try:
            return list(self._enrollments.list_for_student(int(student_id)))
        except PersistenceError:
            logger.exception("Error fetching enrollments for student id=%s", student_id)
            return []

    def students_not_in_course(self, course_id: int) -> Sequence[Student]:
        """Students with no enrollment (of any status) in the course, by name."""

        try:
            students = list(self._students.list_all())
        except PersistenceError:
            logger.exception("Error fetching students")
            return []

        try:
            enrolled = self._enrollments.student_ids_in_course(int(course_id))
        except PersistenceError:
            logger.exception("Error fetching enrollments for course id=%s", course_id)
            enrolled = set()

        available = [s for s in students if s.student_id not in enrolled]
        available.sort(key=lambda s: s.full_name.casefold())
        return available

    def enroll_student(
        self,
        user: Optional[CurrentUser],
        course_id: int,
        student_id: int,
        *,
        notes: Optional[str] = None,
    ) -> int:
        user = require_user(user, "enroll students")
        course_id = parse_int(course_id, "Course")
        student_id = parse_int(student_id, "Student")

        try:
            enrollment_id = self._enrollments.create(
                user_id=user.id,
                course_id=course_id,
                student_id=student_id,
                notes=clean_optional(notes),
            )
        except UniquenessViolation:
            raise UniquenessViolation(ALREADY_ENROLLED)
        except PersistenceError:
            logger.exception("Error enrolling student id=%s in course id=%s", student_id, course_id)
            raise PersistenceError("Failed to enroll student")

        self._invalidate_course(course_id)
        return enrollment_id

    def enroll_students(self, user: Optional[CurrentUser], course_id: int, student_ids: Iterable) -> int:
        user = require_user(user, "enroll students")
        course_id = parse_int(course_id, "Course")
        ids = [parse_int(sid, "Student") for sid in student_ids]
        if not ids:
            raise ValidationError("Select at least one student")

        try:
            count = self._enrollments.create_many(user_id=user.id, course_id=course_id, student_ids=ids)
        except PersistenceError:
            logger.exception("Error enrolling %d students in course id=%s", len(ids), course_id)
            raise PersistenceError("Failed to enroll students")

        self._invalidate_course(course_id)
        return count

    def update_status(self, user: Optional[CurrentUser], enrollment_id: int, status, course_id: int) -> None:
        require_user(user, "update enrollments")
        try:
            new_status = EnrollmentStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown enrollment status: {status!r}")

        try:
            self._enrollments.update_status(enrollment_id=int(enrollment_id), status=new_status)
        except UniquenessViolation:
            raise UniquenessViolation(ALREADY_ENROLLED)
        except PersistenceError:
            logger.exception("Error updating enrollment id=%s", enrollment_id)
            raise PersistenceError("Failed to update enrollment")

        self._invalidate_course(int(course_id))

    def remove_enrollment(self, user: Optional[CurrentUser], enrollment_id: int, course_id: int) -> None:
        require_user(user, "remove enrollments")
        try:
            self._enrollments.delete(enrollment_id=int(enrollment_id))
        except PersistenceError:
            logger.exception("Error removing enrollment id=%s", enrollment_id)
            raise PersistenceError("Failed to remove enrollment")

        self._invalidate_course(int(course_id))
        self._invalidator.invalidate(invalidation.ATTENDANCE_REPORT)
