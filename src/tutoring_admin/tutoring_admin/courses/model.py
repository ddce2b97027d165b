from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Course:
    course_id: int
    user_id: int
    name: str
    color: str
    is_active: bool = True
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class CourseInput:
    name: str
    color: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool = True


@dataclass(frozen=True)
class CourseWithStats:
    """Course detail read-model with roster and lesson counts."""

    course: Course
    student_count: int
    lesson_count: int
