from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import clean_optional, parse_int
from ..core import invalidation
from ..core.enums import AttendanceStatus, SortField, SortOrder
from ..core.exceptions import PersistenceError, ValidationError
from ..core.identity import CurrentUser, require_user
from ..core.invalidation import ViewInvalidator
from ..lessons.repository import LessonRepository
from .filters import ReportQuery, apply_filter, count_statuses, sort_records, summarize_roster
from .model import (
    AttendanceDetail,
    AttendanceFilter,
    AttendanceMark,
    AttendanceStats,
    LessonSummary,
    RosterEntry,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def build_mark(enrollment_id: Any, status: Any, notes: Optional[str] = None) -> AttendanceMark:
    try:
        parsed = AttendanceStatus(status)
    except ValueError:
        raise ValidationError(f"Unknown attendance status: {status!r}")
    return AttendanceMark(
        enrollment_id=parse_int(enrollment_id, "Enrollment"),
        status=parsed,
        notes=clean_optional(notes),
    )


class AttendanceService:
    """Roster resolution, idempotent marking, and report queries for attendance."""

    def __init__(self, attendance: AttendanceRepository, lessons: LessonRepository, invalidator: ViewInvalidator):
        self._attendance = attendance
        self._lessons = lessons
        self._invalidator = invalidator

    # -------- Roster --------
    def resolve_roster(self, lesson_id: int) -> List[RosterEntry]:
        """Active enrollments of the lesson's course with this lesson's attendance.

        A missing lesson or a store failure both yield an empty roster.
        """

        try:
            lesson = self._lessons.get_by_id(int(lesson_id))
            if not lesson:
                return []
            return list(self._attendance.list_roster(course_id=lesson.course_id, lesson_id=lesson.lesson_id))
        except PersistenceError:
            logger.exception("Error fetching attendance roster for lesson id=%s", lesson_id)
            return []

    def lesson_summary(self, roster: Sequence[RosterEntry]) -> LessonSummary:
        return summarize_roster(roster)

    # -------- Marking --------
    def mark_attendance(
        self,
        user: Optional[CurrentUser],
        lesson_id: int,
        enrollment_id: int,
        status,
        notes: Optional[str] = None,
        *,
        now: datetime | None = None,
    ) -> None:
        user = require_user(user, "mark attendance")
        mark = build_mark(enrollment_id, status, notes)
        self._write(user, parse_int(lesson_id, "Lesson"), [mark], now=now)

    def mark_attendance_batch(
        self,
        user: Optional[CurrentUser],
        lesson_id: int,
        records: Iterable[AttendanceMark],
        *,
        now: datetime | None = None,
    ) -> int:
        """Upsert every mark for the lesson; resubmitting the same batch changes nothing.

        When an enrollment appears twice, the later mark wins.
        """

        user = require_user(user, "mark attendance")
        lesson_id = parse_int(lesson_id, "Lesson")
        marks = list(records)
        if not marks:
            return 0
        return self._write(user, lesson_id, marks, now=now)

    def _write(self, user: CurrentUser, lesson_id: int, marks: List[AttendanceMark], *, now: datetime | None) -> int:
        try:
            written = self._attendance.upsert_many(
                user_id=user.id,
                lesson_id=lesson_id,
                marks=marks,
                marked_at=now or now_local(),
            )
        except PersistenceError:
            logger.exception("Error marking attendance lesson id=%s (%d records)", lesson_id, len(marks))
            raise PersistenceError("Failed to mark attendance")

        self._invalidate_lesson(lesson_id)
        return written

    def _invalidate_lesson(self, lesson_id: int) -> None:
        try:
            lesson = self._lessons.get_by_id(lesson_id)
        except PersistenceError:
            logger.exception("Error fetching lesson id=%s for invalidation", lesson_id)
            lesson = None

        if lesson:
            self._invalidator.invalidate(invalidation.lesson_detail(lesson.course_id, lesson_id))
            self._invalidator.invalidate(invalidation.lesson_attendance(lesson.course_id, lesson_id))
        self._invalidator.invalidate(invalidation.ATTENDANCE_REPORT)

    # -------- Reports --------
    def query_attendance(self, f: AttendanceFilter) -> List[AttendanceDetail]:
        """Conjunctive filter over all attendance; status is pushed to the store."""

        try:
            superset = self._attendance.list_detailed(status=f.status)
        except PersistenceError:
            logger.exception("Error fetching attendance")
            return []
        return apply_filter(superset, f)

    def attendance_stats(self, course_id: Optional[int] = None, student_id: Optional[int] = None) -> AttendanceStats:
        try:
            statuses = self._attendance.list_statuses(course_id=course_id, student_id=student_id)
        except PersistenceError:
            logger.exception("Error fetching attendance stats course=%s student=%s", course_id, student_id)
            return AttendanceStats()
        return count_statuses(statuses)

    def sort_attendance(
        self,
        records: Sequence[AttendanceDetail],
        field: SortField = SortField.DATE,
        order: SortOrder = SortOrder.DESC,
    ) -> List[AttendanceDetail]:
        return sort_records(records, field, order)

    def attendance_report(self, query: ReportQuery) -> List[AttendanceDetail]:
        return self.sort_attendance(self.query_attendance(query.filter), query.sort, query.order)

    def student_attendance_history(self, student_id: int) -> List[AttendanceDetail]:
        try:
            return list(self._attendance.list_for_student(int(student_id)))
        except PersistenceError:
            logger.exception("Error fetching attendance history for student id=%s", student_id)
            return []


def marks_from_payload(items: Iterable[Mapping[str, Any]]) -> List[AttendanceMark]:
    """Parse ``[{"enrollment_id", "status", "notes"}]`` from a request body."""

    if items is None or isinstance(items, (str, bytes)) or not hasattr(items, "__iter__"):
        raise ValidationError("records must be a list")
    marks = []
    for item in items:
        if not isinstance(item, Mapping):
            raise ValidationError("Each record must be an object")
        marks.append(build_mark(item.get("enrollment_id"), item.get("status"), item.get("notes")))
    return marks
