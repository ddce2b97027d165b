from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..courses.model import Course


@dataclass(frozen=True)
class Lesson:
    lesson_id: int
    user_id: int
    course_id: int
    title: str
    lesson_date: datetime
    duration_minutes: int = 60
    description: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class LessonInput:
    title: str
    lesson_date: datetime
    duration_minutes: int
    description: Optional[str] = None
    location: Optional[str] = None


@dataclass(frozen=True)
class LessonWithCourse:
    lesson: Lesson
    course: Optional[Course]
