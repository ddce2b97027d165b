from __future__ import annotations

from datetime import datetime

import pytest

from src.tutoring_admin.tutoring_admin.core.exceptions import PersistenceError, UnauthorizedError, ValidationError


def test_create_and_list_newest_first(services, user, invalidator):
    svc = services.student_service
    first = svc.create_student(user, full_name="Dana Levi", email="dana@example.com", phone=" ")
    second = svc.create_student(user, full_name=" Avi Cohen ", email="avi@example.com", notes="Grade 9")

    students = svc.list_students()
    assert [s.student_id for s in students] == [second, first]
    assert students[0].full_name == "Avi Cohen"
    assert students[1].phone is None
    assert invalidator.paths == ["/dashboard", "/dashboard"]


@pytest.mark.parametrize("name, email", [("", "a@example.com"), ("A", ""), (None, None)])
def test_name_and_email_are_required(services, user, name, email):
    with pytest.raises(ValidationError, match="Full name and email are required"):
        services.student_service.create_student(user, full_name=name, email=email)


def test_update_sets_updated_at_and_invalidates_detail(services, store, user, invalidator, fixed_now):
    svc = services.student_service
    sid = svc.create_student(user, full_name="Dana", email="dana@example.com")

    svc.update_student(user, sid, full_name="Dana L.", email="dana@example.com", now=fixed_now)

    assert store.students[sid].full_name == "Dana L."
    assert store.students[sid].updated_at == fixed_now
    assert invalidator.paths[-1] == f"/students/{sid}"


def test_delete_cascades_enrollments_and_email_logs(services, store, seeded, user, transport):
    services.email_service.send_student_email(user, seeded.dana, subject="Hi", body="<p>Hello</p>")

    services.student_service.delete_student(user, seeded.dana)

    assert seeded.dana not in store.students
    assert seeded.e_dana not in store.enrollments
    assert all(log.student_id != seeded.dana for log in store.email_logs.values())


def test_identity_and_failures(services, store, user):
    svc = services.student_service
    with pytest.raises(UnauthorizedError, match="create a student"):
        svc.create_student(None, full_name="A", email="a@example.com")

    store.fail = True
    with pytest.raises(PersistenceError, match="Failed to create student"):
        svc.create_student(user, full_name="A", email="a@example.com")
    assert svc.list_students() == []
    assert svc.get_student(1) is None


def test_created_at_is_set_by_the_store(services, store, user):
    sid = services.student_service.create_student(user, full_name="A", email="a@example.com")
    assert isinstance(store.students[sid].created_at, datetime)
