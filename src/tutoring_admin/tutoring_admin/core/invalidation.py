"""Stale-view signalling.

Services call ``invalidate(path)`` after every write; the presentation layer
decides how to refetch. Paths name logical views, not HTTP routes.
"""

from __future__ import annotations

import contextvars
import logging
from typing import List, Optional, Protocol

logger = logging.getLogger(__name__)

_stale_views_ctx: contextvars.ContextVar[Optional[List[str]]] = contextvars.ContextVar(
    "stale_views", default=None
)


class ViewInvalidator(Protocol):
    def invalidate(self, path: str) -> None:
        raise NotImplementedError


class ContextInvalidator:
    """Collects stale view paths for the current request context."""

    def invalidate(self, path: str) -> None:
        logger.debug("view stale: %s", path)
        paths = _stale_views_ctx.get()
        if paths is None:
            paths = []
            _stale_views_ctx.set(paths)
        if path not in paths:
            paths.append(path)


def drain_stale_views() -> List[str]:
    """Return and clear the stale paths collected in this context."""

    paths = _stale_views_ctx.get() or []
    _stale_views_ctx.set(None)
    return list(paths)


# Logical view paths

DASHBOARD = "/dashboard"
COURSES = "/courses"
ATTENDANCE_REPORT = "/attendance"


def course_detail(course_id: int) -> str:
    return f"/courses/{course_id}"


def course_students(course_id: int) -> str:
    return f"/courses/{course_id}/students"


def lesson_detail(course_id: int, lesson_id: int) -> str:
    return f"/courses/{course_id}/lessons/{lesson_id}"


def lesson_attendance(course_id: int, lesson_id: int) -> str:
    return f"/courses/{course_id}/lessons/{lesson_id}/attendance"


def student_detail(student_id: int) -> str:
    return f"/students/{student_id}"
