from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import parse_int
from ..common.web import current_user, found, payload, written
from ..container import Container
from .filters import parse_report_query
from .service import marks_from_payload


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    @app.route("/api/lessons/<int:lesson_id>/attendance", methods=["GET"], endpoint="attendance_lesson")
    def attendance_lesson(lesson_id: int):
        detail = found(container.lesson_service.get_lesson(lesson_id), "Lesson")
        roster = attendance.resolve_roster(lesson_id)
        return jsonify(
            {
                "lesson": detail.lesson,
                "course": detail.course,
                "roster": roster,
                "summary": attendance.lesson_summary(roster),
            }
        )

    @app.route("/api/lessons/<int:lesson_id>/attendance", methods=["POST"], endpoint="attendance_mark")
    def attendance_mark(lesson_id: int):
        data = payload()
        attendance.mark_attendance(
            current_user(),
            lesson_id,
            data.get("enrollment_id"),
            data.get("status"),
            data.get("notes"),
        )
        return written()

    @app.route("/api/lessons/<int:lesson_id>/attendance/bulk", methods=["POST"], endpoint="attendance_mark_bulk")
    def attendance_mark_bulk(lesson_id: int):
        user = current_user()
        data = payload()
        # Identity is checked by the service before the payload is parsed.
        marks = marks_from_payload(data.get("records") or []) if user else []
        count = attendance.mark_attendance_batch(user, lesson_id, marks)
        return written(count=count)

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_report")
    def attendance_report():
        query = parse_report_query(request.args)
        records = attendance.attendance_report(query)
        return jsonify(
            {
                "records": records,
                "sort": query.sort.value,
                "order": query.order.value,
            }
        )

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    def attendance_stats():
        course = request.args.get("course")
        student = request.args.get("student")
        stats = attendance.attendance_stats(
            course_id=parse_int(course, "course") if course else None,
            student_id=parse_int(student, "student") if student else None,
        )
        return jsonify(stats.as_dict())

    @app.route("/api/students/<int:student_id>/attendance", methods=["GET"], endpoint="attendance_student_history")
    def attendance_student_history(student_id: int):
        return jsonify({"records": attendance.student_attendance_history(student_id)})
