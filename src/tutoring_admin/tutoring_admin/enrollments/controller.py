from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_user, payload, written
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    enrollments = container.enrollment_service

    @app.route("/api/courses/<int:course_id>/enrollments", methods=["GET"], endpoint="enrollments_list")
    def enrollments_list(course_id: int):
        return jsonify({"enrollments": enrollments.list_by_course(course_id)})

    @app.route("/api/courses/<int:course_id>/available-students", methods=["GET"], endpoint="enrollments_available")
    def enrollments_available(course_id: int):
        return jsonify({"students": enrollments.students_not_in_course(course_id)})

    @app.route("/api/courses/<int:course_id>/enrollments", methods=["POST"], endpoint="enrollments_create")
    def enrollments_create(course_id: int):
        data = payload()
        if "student_ids" in data:
            student_ids = data.get("student_ids")
            if not isinstance(student_ids, list):
                raise ValidationError("student_ids must be a list")
            count = enrollments.enroll_students(current_user(), course_id, student_ids)
            return written(201, count=count)

        enrollment_id = enrollments.enroll_student(
            current_user(),
            course_id,
            data.get("student_id"),
            notes=data.get("notes"),
        )
        return written(201, id=enrollment_id)

    @app.route("/api/enrollments/<int:enrollment_id>", methods=["PUT", "POST"], endpoint="enrollments_update")
    def enrollments_update(enrollment_id: int):
        data = payload()
        enrollments.update_status(current_user(), enrollment_id, data.get("status"), _course_id(data))
        return written(id=enrollment_id)

    @app.route("/api/enrollments/<int:enrollment_id>", methods=["DELETE"], endpoint="enrollments_delete")
    def enrollments_delete(enrollment_id: int):
        data = payload()
        enrollments.remove_enrollment(current_user(), enrollment_id, _course_id(data))
        return written(id=enrollment_id)

    def _course_id(data: dict) -> int:
        try:
            return int(data.get("course_id"))
        except (TypeError, ValueError):
            raise ValidationError("course_id is required")
