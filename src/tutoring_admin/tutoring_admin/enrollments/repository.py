from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EnrollmentStatus
from .model import EnrollmentWithCourse, EnrollmentWithStudent


class EnrollmentRepository(Protocol):
    def list_for_course(self, course_id: int) -> Sequence[EnrollmentWithStudent]:
        """Newest enrollment first."""

        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[EnrollmentWithCourse]:
        raise NotImplementedError

    def student_ids_in_course(self, course_id: int) -> set[int]:
        """Any status."""

        raise NotImplementedError

    def create(self, *, user_id: int, course_id: int, student_id: int, notes: Optional[str] = None) -> int:
        """Insert an active enrollment.

        Raises UniquenessViolation when the student already has an active
        enrollment in the course.
        """

        raise NotImplementedError

    def create_many(self, *, user_id: int, course_id: int, student_ids: Sequence[int]) -> int:
        raise NotImplementedError

    def update_status(self, *, enrollment_id: int, status: EnrollmentStatus) -> bool:
        raise NotImplementedError

    def delete(self, *, enrollment_id: int) -> bool:
        """Attendance for the enrollment cascades in the store."""

        raise NotImplementedError
