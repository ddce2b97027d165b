from __future__ import annotations


def test_writes_without_a_session_are_unauthorized(client, store):
    resp = client.post("/api/students", json={"full_name": "Dana", "email": "dana@example.com"})

    assert resp.status_code == 401
    assert resp.get_json() == {"error": "You must be logged in to create a student"}
    assert store.students == {}


def test_create_student_reports_stale_views(auth_client):
    resp = auth_client.post("/api/students", json={"full_name": "Dana", "email": "dana@example.com"})

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["stale_views"] == ["/dashboard"]

    listed = auth_client.get("/api/students").get_json()["students"]
    assert [s["full_name"] for s in listed] == ["Dana"]
    assert "T" in listed[0]["created_at"]


def test_form_posts_are_accepted(auth_client):
    resp = auth_client.post("/api/students", data={"full_name": "Avi", "email": "avi@example.com"})
    assert resp.status_code == 201


def test_validation_errors_are_400(auth_client):
    resp = auth_client.post("/api/students", json={"full_name": "", "email": ""})

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Full name and email are required"


def test_missing_student_is_404(client):
    resp = client.get("/api/students/999")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Student not found"}


def test_student_detail(client, seeded):
    body = client.get(f"/api/students/{seeded.dana}").get_json()

    assert body["student"]["email"] == "dana@example.com"
    assert [e["course"]["name"] for e in body["enrollments"]] == ["Algebra I"]
    assert body["attendance_stats"]["total"] == 0


def test_course_detail_with_counts(client, seeded):
    body = client.get(f"/api/courses/{seeded.course_id}").get_json()

    assert body["course"]["name"] == "Algebra I"
    assert body["student_count"] == 2
    assert body["lesson_count"] == 1
    assert body["lessons"][0]["lesson_date"] == "2026-03-02T16:00:00"


def test_duplicate_enrollment_is_409(auth_client, seeded):
    resp = auth_client.post(f"/api/courses/{seeded.course_id}/enrollments", json={"student_id": seeded.dana})

    assert resp.status_code == 409
    assert resp.get_json() == {"error": "Student is already enrolled in this course"}


def test_bulk_enrollment_and_available_students(auth_client, seeded):
    created = auth_client.post("/api/students", json={"full_name": "Eli", "email": "eli@example.com"}).get_json()["id"]

    available = auth_client.get(f"/api/courses/{seeded.course_id}/available-students").get_json()["students"]
    assert [s["student_id"] for s in available] == [created]

    resp = auth_client.post(f"/api/courses/{seeded.course_id}/enrollments", json={"student_ids": [created]})
    assert resp.status_code == 201
    assert resp.get_json()["count"] == 1
    assert f"/courses/{seeded.course_id}/students" in resp.get_json()["stale_views"]


def test_mark_then_view_lesson_attendance(auth_client, seeded):
    resp = auth_client.post(
        f"/api/lessons/{seeded.lesson_id}/attendance",
        json={"enrollment_id": seeded.e_dana, "status": "present"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["stale_views"] == [
        f"/courses/{seeded.course_id}/lessons/{seeded.lesson_id}",
        f"/courses/{seeded.course_id}/lessons/{seeded.lesson_id}/attendance",
        "/attendance",
    ]

    body = auth_client.get(f"/api/lessons/{seeded.lesson_id}/attendance").get_json()
    assert body["summary"]["total_students"] == 2
    assert body["summary"]["marked"] == 1
    marked = [e for e in body["roster"] if e["attendance"]]
    assert marked[0]["attendance"][0]["status"] == "present"


def test_bulk_marking_is_idempotent(auth_client, store, seeded):
    payload = {
        "records": [
            {"enrollment_id": seeded.e_dana, "status": "present"},
            {"enrollment_id": seeded.e_avi, "status": "absent", "notes": "sick"},
        ]
    }

    first = auth_client.post(f"/api/lessons/{seeded.lesson_id}/attendance/bulk", json=payload)
    second = auth_client.post(f"/api/lessons/{seeded.lesson_id}/attendance/bulk", json=payload)

    assert first.get_json()["count"] == second.get_json()["count"] == 2
    assert len(store.attendance) == 2


def test_bulk_marking_without_session_writes_nothing(client, repos, seeded):
    resp = client.post(
        f"/api/lessons/{seeded.lesson_id}/attendance/bulk",
        json={"records": [{"enrollment_id": seeded.e_dana, "status": "present"}]},
    )

    assert resp.status_code == 401
    assert repos.attendance.upsert_calls == 0


def test_attendance_report_query(auth_client, seeded):
    for eid, status in ((seeded.e_dana, "present"), (seeded.e_avi, "late")):
        auth_client.post(f"/api/lessons/{seeded.lesson_id}/attendance", json={"enrollment_id": eid, "status": status})

    body = auth_client.get(
        f"/api/attendance?course={seeded.course_id}&from=2026-03-02&to=2026-03-02&sort=student&order=asc"
    ).get_json()
    assert [r["student"]["full_name"] for r in body["records"]] == ["Avi Cohen", "Dana Levi"]
    assert (body["sort"], body["order"]) == ("student", "asc")

    late = auth_client.get("/api/attendance?status=late").get_json()["records"]
    assert [r["record"]["enrollment_id"] for r in late] == [seeded.e_avi]

    assert auth_client.get("/api/attendance?status=asleep").status_code == 400

    stats = auth_client.get(f"/api/attendance/stats?course={seeded.course_id}").get_json()
    assert stats == {"present": 1, "absent": 0, "late": 1, "excused": 0, "total": 2}


def test_failed_email_is_reported_and_logged(auth_client, store, seeded, transport):
    transport.fail_with = "RESEND_API_KEY is not configured. Please add it to your environment variables."

    resp = auth_client.post(f"/api/students/{seeded.dana}/emails", json={"subject": "Hi", "body": "Hello"})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    logs = auth_client.get(f"/api/students/{seeded.dana}/emails").get_json()["emails"]
    assert [log["status"] for log in logs] == ["failed"]


def test_lesson_crud_over_http(auth_client, seeded):
    resp = auth_client.post(
        f"/api/courses/{seeded.course_id}/lessons",
        json={"title": "Graphs", "lesson_date": "2026-04-01", "lesson_time": "18:00", "duration_minutes": 45},
    )
    assert resp.status_code == 201
    lesson_id = resp.get_json()["id"]

    detail = auth_client.get(f"/api/lessons/{lesson_id}").get_json()
    assert detail["lesson"]["duration_minutes"] == 45
    assert detail["course"]["course_id"] == seeded.course_id

    assert auth_client.delete(f"/api/lessons/{lesson_id}").status_code == 200
    assert auth_client.get(f"/api/lessons/{lesson_id}").status_code == 404
    assert auth_client.get(f"/api/lessons/{lesson_id}/attendance").status_code == 404


def test_store_outage_reads_are_empty_and_writes_are_500(auth_client, store):
    store.fail = True

    assert auth_client.get("/api/students").get_json() == {"students": []}

    resp = auth_client.post("/api/courses", json={"name": "Physics"})
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to create course"}


def test_lesson_update_and_delete_without_a_session_are_unauthorized(client, store, seeded):
    assert client.delete("/api/lessons/999").status_code == 401

    resp = client.delete(f"/api/lessons/{seeded.lesson_id}")
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "You must be logged in to delete a lesson"}

    resp = client.put(f"/api/lessons/{seeded.lesson_id}", json={"title": "X"})
    assert resp.status_code == 401
    assert seeded.lesson_id in store.lessons


def test_lesson_update_and_delete_during_store_outage_are_500(auth_client, store, seeded):
    store.fail = True

    resp = auth_client.delete(f"/api/lessons/{seeded.lesson_id}")
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to delete lesson"}

    resp = auth_client.put(
        f"/api/lessons/{seeded.lesson_id}",
        json={"title": "X", "lesson_date": "2026-03-03", "lesson_time": "16:00"},
    )
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to update lesson"}


def test_missing_lesson_update_and_delete_are_404(auth_client):
    assert auth_client.delete("/api/lessons/999").status_code == 404
    resp = auth_client.put("/api/lessons/999", json={"title": "X", "lesson_date": "2026-03-03", "lesson_time": "16:00"})
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Lesson not found"}
