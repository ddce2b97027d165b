from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Course, CourseInput


class CourseRepository(Protocol):
    def list_all(self, *, active_only: bool = False) -> Sequence[Course]:
        """Newest first."""

        raise NotImplementedError

    def get_by_id(self, course_id: int) -> Optional[Course]:
        raise NotImplementedError

    def count_active_enrollments(self, course_id: int) -> int:
        raise NotImplementedError

    def count_lessons(self, course_id: int) -> int:
        raise NotImplementedError

    def create(self, *, user_id: int, data: CourseInput) -> int:
        raise NotImplementedError

    def update(self, *, course_id: int, data: CourseInput) -> bool:
        raise NotImplementedError

    def set_active(self, *, course_id: int, is_active: bool) -> bool:
        raise NotImplementedError

    def delete(self, *, course_id: int) -> bool:
        """Lessons, enrollments and their attendance cascade in the store."""

        raise NotImplementedError
