from __future__ import annotations

import pytest

from src.tutoring_admin.tutoring_admin.core import invalidation
from src.tutoring_admin.tutoring_admin.core.exceptions import UnauthorizedError
from src.tutoring_admin.tutoring_admin.core.identity import CurrentUser, current_user_from_session, require_user
from src.tutoring_admin.tutoring_admin.core.invalidation import ContextInvalidator, drain_stale_views


def test_current_user_from_session():
    assert current_user_from_session({}) is None
    assert current_user_from_session({"user_id": "abc"}) is None
    assert current_user_from_session({"user_id": "7", "email": "t@example.com"}) == CurrentUser(id=7, email="t@example.com")


def test_require_user_names_the_action():
    with pytest.raises(UnauthorizedError, match="You must be logged in to mark attendance"):
        require_user(None, "mark attendance")

    u = CurrentUser(id=1, email="")
    assert require_user(u, "anything") is u


def test_context_invalidator_dedupes_and_drains():
    drain_stale_views()
    inv = ContextInvalidator()

    inv.invalidate(invalidation.course_detail(3))
    inv.invalidate(invalidation.ATTENDANCE_REPORT)
    inv.invalidate(invalidation.course_detail(3))

    assert drain_stale_views() == ["/courses/3", "/attendance"]
    assert drain_stale_views() == []


def test_view_paths():
    assert invalidation.lesson_detail(2, 5) == "/courses/2/lessons/5"
    assert invalidation.lesson_attendance(2, 5) == "/courses/2/lessons/5/attendance"
    assert invalidation.course_students(2) == "/courses/2/students"
    assert invalidation.student_detail(9) == "/students/9"
