from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status stored per (enrollment, lesson)."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    DROPPED = "dropped"


class EmailStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"


class SortField(str, Enum):
    """Columns the attendance report can be ordered by."""

    DATE = "date"
    STUDENT = "student"
    COURSE = "course"
    LESSON = "lesson"
    STATUS = "status"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
