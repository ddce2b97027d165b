from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Lesson, LessonInput, LessonWithCourse


class LessonRepository(Protocol):
    def list_for_course(self, course_id: int) -> Sequence[Lesson]:
        """Ordered by lesson date ascending."""

        raise NotImplementedError

    def get_by_id(self, lesson_id: int) -> Optional[Lesson]:
        raise NotImplementedError

    def get_with_course(self, lesson_id: int) -> Optional[LessonWithCourse]:
        raise NotImplementedError

    def list_upcoming(self, *, after: datetime, limit: int) -> Sequence[LessonWithCourse]:
        raise NotImplementedError

    def create(self, *, user_id: int, course_id: int, data: LessonInput) -> int:
        raise NotImplementedError

    def update(self, *, lesson_id: int, data: LessonInput) -> bool:
        raise NotImplementedError

    def delete(self, *, lesson_id: int) -> bool:
        """Attendance for the lesson cascades in the store."""

        raise NotImplementedError
