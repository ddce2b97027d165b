from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import combine_date_time, now_local
from ..common.validators import clean_optional, require_fields
from ..core import invalidation
from ..core.constants import (
    DEFAULT_LESSON_DURATION_MINUTES,
    DEFAULT_UPCOMING_LIMIT,
    MAX_LESSON_DURATION_MINUTES,
    MIN_LESSON_DURATION_MINUTES,
)
from ..core.exceptions import NotFoundError, PersistenceError, ValidationError
from ..core.identity import CurrentUser, require_user
from ..core.invalidation import ViewInvalidator
from .model import Lesson, LessonInput, LessonWithCourse
from .repository import LessonRepository

logger = logging.getLogger(__name__)


def _parse_duration(value: Any) -> int:
    # Missing or unparseable input falls back to the default, like the lesson form does.
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        return DEFAULT_LESSON_DURATION_MINUTES
    if minutes == 0:
        return DEFAULT_LESSON_DURATION_MINUTES
    if not MIN_LESSON_DURATION_MINUTES <= minutes <= MAX_LESSON_DURATION_MINUTES:
        raise ValidationError(
            f"Duration must be between {MIN_LESSON_DURATION_MINUTES} and {MAX_LESSON_DURATION_MINUTES} minutes"
        )
    return minutes


def _lesson_input(
    *,
    title: Optional[str],
    lesson_date: Optional[str],
    lesson_time: Optional[str],
    duration_minutes: Any,
    description: Optional[str],
    location: Optional[str],
) -> LessonInput:
    require_fields("Title, date, and time are required", title, lesson_date, lesson_time)
    return LessonInput(
        title=str(title).strip(),
        lesson_date=combine_date_time(str(lesson_date), str(lesson_time)),
        duration_minutes=_parse_duration(duration_minutes),
        description=clean_optional(description),
        location=clean_optional(location),
    )


class LessonService:
    def __init__(self, lessons: LessonRepository, invalidator: ViewInvalidator):
        self._lessons = lessons
        self._invalidator = invalidator

    def list_lessons(self, course_id: int) -> Sequence[Lesson]:
        try:
            return list(self._lessons.list_for_course(int(course_id)))
        except PersistenceError:
            logger.exception("Error fetching lessons for course id=%s", course_id)
            return []

    def get_lesson(self, lesson_id: int) -> Optional[LessonWithCourse]:
        try:
            return self._lessons.get_with_course(int(lesson_id))
        except PersistenceError:
            logger.exception("Error fetching lesson id=%s", lesson_id)
            return None

    def _course_id_for(self, lesson_id: int) -> int:
        # Unlike get_lesson, store failures propagate so writes never mistake them for a missing row.
        lesson = self._lessons.get_by_id(int(lesson_id))
        if lesson is None:
            raise NotFoundError("Lesson not found")
        return lesson.course_id

    def upcoming_lessons(self, *, limit: int = DEFAULT_UPCOMING_LIMIT, now: datetime | None = None) -> Sequence[LessonWithCourse]:
        try:
            return list(self._lessons.list_upcoming(after=now or now_local(), limit=int(limit)))
        except PersistenceError:
            logger.exception("Error fetching upcoming lessons")
            return []

    def create_lesson(
        self,
        user: Optional[CurrentUser],
        course_id: int,
        *,
        title: Optional[str],
        lesson_date: Optional[str],
        lesson_time: Optional[str],
        duration_minutes: Any = None,
        description: Optional[str] = None,
        location: Optional[str] = None,
    ) -> int:
        user = require_user(user, "create a lesson")
        data = _lesson_input(
            title=title,
            lesson_date=lesson_date,
            lesson_time=lesson_time,
            duration_minutes=duration_minutes,
            description=description,
            location=location,
        )
        try:
            lesson_id = self._lessons.create(user_id=user.id, course_id=int(course_id), data=data)
        except PersistenceError:
            logger.exception("Error creating lesson for course id=%s", course_id)
            raise PersistenceError("Failed to create lesson")

        self._invalidator.invalidate(invalidation.course_detail(int(course_id)))
        return lesson_id

    def update_lesson(
        self,
        user: Optional[CurrentUser],
        lesson_id: int,
        course_id: Optional[int] = None,
        *,
        title: Optional[str],
        lesson_date: Optional[str],
        lesson_time: Optional[str],
        duration_minutes: Any = None,
        description: Optional[str] = None,
        location: Optional[str] = None,
    ) -> None:
        require_user(user, "update a lesson")
        data = _lesson_input(
            title=title,
            lesson_date=lesson_date,
            lesson_time=lesson_time,
            duration_minutes=duration_minutes,
            description=description,
            location=location,
        )
        try:
            if course_id is None:
                course_id = self._course_id_for(lesson_id)
            self._lessons.update(lesson_id=int(lesson_id), data=data)
        except PersistenceError:
            logger.exception("Error updating lesson id=%s", lesson_id)
            raise PersistenceError("Failed to update lesson")

        self._invalidator.invalidate(invalidation.course_detail(int(course_id)))
        self._invalidator.invalidate(invalidation.lesson_detail(int(course_id), int(lesson_id)))

    def delete_lesson(self, user: Optional[CurrentUser], lesson_id: int, course_id: Optional[int] = None) -> None:
        require_user(user, "delete a lesson")
        try:
            if course_id is None:
                course_id = self._course_id_for(lesson_id)
            self._lessons.delete(lesson_id=int(lesson_id))
        except PersistenceError:
            logger.exception("Error deleting lesson id=%s", lesson_id)
            raise PersistenceError("Failed to delete lesson")

        self._invalidator.invalidate(invalidation.course_detail(int(course_id)))
        self._invalidator.invalidate(invalidation.ATTENDANCE_REPORT)
