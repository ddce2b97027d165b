from __future__ import annotations

from src.tutoring_admin.tutoring_admin.core.enums import EmailStatus
from src.tutoring_admin.tutoring_admin.emails.model import SendEmailResult


def test_send_logs_sent_attempt(services, store, seeded, user, transport, invalidator):
    result = services.email_service.send_student_email(user, seeded.dana, subject=" Homework ", body="<p>Page 12</p>")

    assert result == SendEmailResult(success=True)
    assert transport.sent == [{"to": "dana@example.com", "subject": "Homework", "body": "<p>Page 12</p>"}]
    [log] = store.email_logs.values()
    assert (log.student_id, log.status, log.subject) == (seeded.dana, EmailStatus.SENT, "Homework")
    assert invalidator.paths == [f"/students/{seeded.dana}"]


def test_delivery_failure_is_logged_as_failed(services, store, seeded, user, transport):
    transport.fail_with = "domain not verified"

    result = services.email_service.send_student_email(user, seeded.dana, subject="Hi", body="Hello")

    assert result == SendEmailResult(success=False, error="domain not verified")
    [log] = store.email_logs.values()
    assert log.status == EmailStatus.FAILED


def test_rejections_before_sending(services, store, seeded, user, transport):
    svc = services.email_service

    assert svc.send_student_email(None, seeded.dana, subject="a", body="b").error == "You must be logged in to send emails"
    assert svc.send_student_email(user, seeded.dana, subject=" ", body="b").error == "Subject and message are required"
    assert svc.send_student_email(user, seeded.dana, subject="a", body="").error == "Subject and message are required"
    assert svc.send_student_email(user, 9999, subject="a", body="b").error == "Student not found"

    assert transport.sent == []
    assert store.email_logs == {}


def test_email_logs_newest_first(services, seeded, user):
    svc = services.email_service
    svc.send_student_email(user, seeded.dana, subject="First", body="1")
    svc.send_student_email(user, seeded.dana, subject="Second", body="2")

    assert [log.subject for log in svc.get_email_logs(seeded.dana)] == ["Second", "First"]
    assert svc.get_email_logs(seeded.avi) == []
