from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceDetail, AttendanceMark, RosterEntry


class AttendanceRepository(Protocol):
    def list_roster(self, *, course_id: int, lesson_id: int) -> Sequence[RosterEntry]:
        """Active enrollments of the course, each with its attendance for the lesson (0 or 1)."""

        raise NotImplementedError

    def upsert_many(
        self,
        *,
        user_id: int,
        lesson_id: int,
        marks: Sequence[AttendanceMark],
        marked_at: datetime,
    ) -> int:
        """Insert or overwrite one row per (enrollment, lesson).

        Returns the number of marks written.
        """

        raise NotImplementedError

    def list_detailed(self, *, status: Optional[AttendanceStatus] = None) -> Sequence[AttendanceDetail]:
        """All attendance rows with joins attached, newest mark first.

        Only ``status`` can be filtered by the store.
        """

        raise NotImplementedError

    def list_statuses(self, *, course_id: Optional[int] = None, student_id: Optional[int] = None) -> Sequence[Optional[str]]:
        """Raw status values of rows whose enrollment matches the given course/student."""

        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[AttendanceDetail]:
        raise NotImplementedError
