from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

import pytest

from src.tutoring_admin.tutoring_admin.container import build_services
from src.tutoring_admin.tutoring_admin.core.enums import EnrollmentStatus
from src.tutoring_admin.tutoring_admin.core.identity import CurrentUser
from src.tutoring_admin.tutoring_admin.core.invalidation import ContextInvalidator, drain_stale_views
from src.tutoring_admin.tutoring_admin.courses.model import CourseInput
from src.tutoring_admin.tutoring_admin.lessons.model import LessonInput
from src.tutoring_admin.tutoring_admin.main import create_app
from src.tutoring_admin.tutoring_admin.students.model import StudentInput
from tests.fakes import (
    FakeTransport,
    InMemoryAttendance,
    InMemoryCourses,
    InMemoryEmailLogs,
    InMemoryEnrollments,
    InMemoryLessons,
    InMemoryStore,
    InMemoryStudents,
    RecordingInvalidator,
)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 10, 10, 0, 0)


@pytest.fixture
def user() -> CurrentUser:
    return CurrentUser(id=1, email="tutor@example.com")


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def repos(store):
    return SimpleNamespace(
        students=InMemoryStudents(store),
        courses=InMemoryCourses(store),
        lessons=InMemoryLessons(store),
        enrollments=InMemoryEnrollments(store),
        attendance=InMemoryAttendance(store),
        email_logs=InMemoryEmailLogs(store),
    )


@pytest.fixture
def invalidator() -> RecordingInvalidator:
    return RecordingInvalidator()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def services(repos, transport, invalidator):
    return build_services(
        students=repos.students,
        courses=repos.courses,
        lessons=repos.lessons,
        enrollments=repos.enrollments,
        attendance=repos.attendance,
        email_logs=repos.email_logs,
        transport=transport,
        invalidator=invalidator,
    )


@pytest.fixture
def seeded(repos):
    """One course with a lesson, two active students and one dropped student."""

    course_id = repos.courses.create(user_id=1, data=CourseInput(name="Algebra I", color="#6366f1"))
    lesson_id = repos.lessons.create(
        user_id=1,
        course_id=course_id,
        data=LessonInput(title="Linear equations", lesson_date=datetime(2026, 3, 2, 16, 0), duration_minutes=60),
    )
    dana = repos.students.create(user_id=1, data=StudentInput(full_name="Dana Levi", email="dana@example.com"))
    avi = repos.students.create(user_id=1, data=StudentInput(full_name="Avi Cohen", email="avi@example.com"))
    noa = repos.students.create(user_id=1, data=StudentInput(full_name="Noa Bar", email="noa@example.com"))

    e_dana = repos.enrollments.create(user_id=1, course_id=course_id, student_id=dana)
    e_avi = repos.enrollments.create(user_id=1, course_id=course_id, student_id=avi)
    e_noa = repos.enrollments.create(user_id=1, course_id=course_id, student_id=noa)
    repos.enrollments.update_status(enrollment_id=e_noa, status=EnrollmentStatus.DROPPED)

    return SimpleNamespace(
        course_id=course_id,
        lesson_id=lesson_id,
        dana=dana,
        avi=avi,
        noa=noa,
        e_dana=e_dana,
        e_avi=e_avi,
        e_noa=e_noa,
    )


@pytest.fixture
def app(monkeypatch, repos, transport):
    monkeypatch.setenv("APP_ENV", "testing")
    container = build_services(
        students=repos.students,
        courses=repos.courses,
        lessons=repos.lessons,
        enrollments=repos.enrollments,
        attendance=repos.attendance,
        email_logs=repos.email_logs,
        transport=transport,
        invalidator=ContextInvalidator(),
    )
    app = create_app(container=container)
    yield app
    drain_stale_views()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    with client.session_transaction() as sess:
        sess["user_id"] = 1
        sess["email"] = "tutor@example.com"
    return client
