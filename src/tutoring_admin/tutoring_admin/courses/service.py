from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import parse_optional_date
from ..common.validators import clean_optional, require_fields
from ..core import invalidation
from ..core.constants import DEFAULT_COURSE_COLOR
from ..core.exceptions import PersistenceError, ValidationError
from ..core.identity import CurrentUser, require_user
from ..core.invalidation import ViewInvalidator
from .model import Course, CourseInput, CourseWithStats
from .repository import CourseRepository

logger = logging.getLogger(__name__)


def _course_input(
    *,
    name: Optional[str],
    description: Optional[str],
    color: Optional[str],
    start_date: Optional[str],
    end_date: Optional[str],
    is_active: bool,
) -> CourseInput:
    require_fields("Course name is required", name)
    start: Optional[date] = parse_optional_date(start_date)
    end: Optional[date] = parse_optional_date(end_date)
    if start and end and end < start:
        raise ValidationError("End date cannot be before start date")
    return CourseInput(
        name=str(name).strip(),
        color=clean_optional(color) or DEFAULT_COURSE_COLOR,
        description=clean_optional(description),
        start_date=start,
        end_date=end,
        is_active=bool(is_active),
    )


class CourseService:
    def __init__(self, courses: CourseRepository, invalidator: ViewInvalidator, *, max_workers: int = 3):
        self._courses = courses
        self._invalidator = invalidator
        self._max_workers = int(max_workers)

    def list_courses(self, *, active_only: bool = False) -> Sequence[Course]:
        try:
            return list(self._courses.list_all(active_only=active_only))
        except PersistenceError:
            logger.exception("Error fetching courses")
            return []

    def get_course(self, course_id: int) -> Optional[Course]:
        try:
            return self._courses.get_by_id(int(course_id))
        except PersistenceError:
            logger.exception("Error fetching course id=%s", course_id)
            return None

    def get_course_with_stats(self, course_id: int) -> Optional[CourseWithStats]:
        """Course plus active-student and lesson counts.

        The three reads are independent and issued concurrently. A failed
        course read yields ``None``; a failed count degrades to 0.
        """

        course_id = int(course_id)
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            course_f = pool.submit(self._courses.get_by_id, course_id)
            students_f = pool.submit(self._courses.count_active_enrollments, course_id)
            lessons_f = pool.submit(self._courses.count_lessons, course_id)

        try:
            course = course_f.result()
        except PersistenceError:
            logger.exception("Error fetching course id=%s", course_id)
            return None
        if course is None:
            return None

        return CourseWithStats(
            course=course,
            student_count=self._count_or_zero(students_f, "enrollments", course_id),
            lesson_count=self._count_or_zero(lessons_f, "lessons", course_id),
        )

    @staticmethod
    def _count_or_zero(future, what: str, course_id: int) -> int:
        try:
            return int(future.result())
        except PersistenceError:
            logger.exception("Error counting %s for course id=%s", what, course_id)
            return 0

    def create_course(
        self,
        user: Optional[CurrentUser],
        *,
        name: Optional[str],
        description: Optional[str] = None,
        color: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> int:
        user = require_user(user, "create a course")
        data = _course_input(
            name=name,
            description=description,
            color=color,
            start_date=start_date,
            end_date=end_date,
            is_active=True,
        )
        try:
            course_id = self._courses.create(user_id=user.id, data=data)
        except PersistenceError:
            logger.exception("Error creating course")
            raise PersistenceError("Failed to create course")

        self._invalidator.invalidate(invalidation.COURSES)
        return course_id

    def update_course(
        self,
        user: Optional[CurrentUser],
        course_id: int,
        *,
        name: Optional[str],
        description: Optional[str] = None,
        color: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        is_active: bool = True,
    ) -> None:
        require_user(user, "update a course")
        data = _course_input(
            name=name,
            description=description,
            color=color,
            start_date=start_date,
            end_date=end_date,
            is_active=is_active,
        )
        try:
            self._courses.update(course_id=int(course_id), data=data)
        except PersistenceError:
            logger.exception("Error updating course id=%s", course_id)
            raise PersistenceError("Failed to update course")

        self._invalidator.invalidate(invalidation.COURSES)
        self._invalidator.invalidate(invalidation.course_detail(int(course_id)))

    def set_course_active(self, user: Optional[CurrentUser], course_id: int, is_active: bool) -> None:
        require_user(user, "update a course")
        try:
            self._courses.set_active(course_id=int(course_id), is_active=bool(is_active))
        except PersistenceError:
            logger.exception("Error toggling course id=%s", course_id)
            raise PersistenceError("Failed to update course")

        self._invalidator.invalidate(invalidation.COURSES)
        self._invalidator.invalidate(invalidation.course_detail(int(course_id)))

    def delete_course(self, user: Optional[CurrentUser], course_id: int) -> None:
        require_user(user, "delete a course")
        try:
            self._courses.delete(course_id=int(course_id))
        except PersistenceError:
            logger.exception("Error deleting course id=%s", course_id)
            raise PersistenceError("Failed to delete course")

        self._invalidator.invalidate(invalidation.COURSES)
        self._invalidator.invalidate(invalidation.ATTENDANCE_REPORT)
