from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EnrollmentStatus
from ..courses.model import Course
from ..students.model import Student


@dataclass(frozen=True)
class Enrollment:
    enrollment_id: int
    user_id: int
    student_id: int
    course_id: int
    status: EnrollmentStatus
    enrolled_at: Optional[datetime] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class EnrollmentWithStudent:
    enrollment: Enrollment
    student: Optional[Student]


@dataclass(frozen=True)
class EnrollmentWithCourse:
    enrollment: Enrollment
    course: Optional[Course]
