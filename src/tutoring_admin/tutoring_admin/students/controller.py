from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_user, found, payload, written
from ..container import Container


def register(app: Flask, container: Container) -> None:
    students = container.student_service

    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    def students_list():
        return jsonify({"students": students.list_students()})

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    def students_create():
        data = payload()
        student_id = students.create_student(
            current_user(),
            full_name=data.get("full_name"),
            email=data.get("email"),
            phone=data.get("phone"),
            notes=data.get("notes"),
        )
        return written(201, id=student_id)

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="students_detail")
    def students_detail(student_id: int):
        student = found(students.get_student(student_id), "Student")
        enrollments = container.enrollment_service.list_by_student(student_id)
        stats = container.attendance_service.attendance_stats(student_id=student_id)
        return jsonify({"student": student, "enrollments": enrollments, "attendance_stats": stats.as_dict()})

    @app.route("/api/students/<int:student_id>", methods=["PUT", "POST"], endpoint="students_update")
    def students_update(student_id: int):
        data = payload()
        students.update_student(
            current_user(),
            student_id,
            full_name=data.get("full_name"),
            email=data.get("email"),
            phone=data.get("phone"),
            notes=data.get("notes"),
        )
        return written(id=student_id)

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="students_delete")
    def students_delete(student_id: int):
        students.delete_student(current_user(), student_id)
        return written(id=student_id)
