from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from ..core.enums import AttendanceStatus
from ..courses.model import Course
from ..enrollments.model import Enrollment
from ..lessons.model import Lesson
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceRecord:
    """One row per (enrollment, lesson); re-marking overwrites it."""

    attendance_id: int
    user_id: int
    enrollment_id: int
    lesson_id: int
    status: AttendanceStatus
    marked_at: datetime
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceMark:
    """Desired state for one enrollment in a lesson (upsert input)."""

    enrollment_id: int
    status: AttendanceStatus
    notes: Optional[str] = None


@dataclass(frozen=True)
class RosterEntry:
    """An active enrollment left-joined with its attendance for one lesson.

    ``attendance`` holds zero or one record.
    """

    enrollment: Enrollment
    student: Optional[Student]
    attendance: Tuple[AttendanceRecord, ...] = ()

    @property
    def is_marked(self) -> bool:
        return len(self.attendance) > 0

    @property
    def current_status(self) -> Optional[AttendanceStatus]:
        return self.attendance[0].status if self.attendance else None


@dataclass(frozen=True)
class AttendanceDetail:
    """Read-model: attendance row with its enrollment, student, course and lesson.

    Any join target may be missing (e.g. a row whose lesson was deleted).
    """

    record: AttendanceRecord
    enrollment: Optional[Enrollment] = None
    student: Optional[Student] = None
    course: Optional[Course] = None
    lesson: Optional[Lesson] = None

    @property
    def lesson_date(self) -> Optional[datetime]:
        return self.lesson.lesson_date if self.lesson else None


@dataclass(frozen=True)
class AttendanceFilter:
    """Conjunctive filter; ``None`` fields do not constrain."""

    course_id: Optional[int] = None
    student_id: Optional[int] = None
    lesson_id: Optional[int] = None
    status: Optional[AttendanceStatus] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


@dataclass(frozen=True)
class AttendanceStats:
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0
    total: int = 0

    def as_dict(self) -> dict:
        return {
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "excused": self.excused,
            "total": self.total,
        }


@dataclass(frozen=True)
class LessonSummary:
    total_students: int = 0
    marked: int = 0
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0
