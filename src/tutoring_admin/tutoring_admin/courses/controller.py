from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import as_bool, current_user, found, payload, written
from ..container import Container


def register(app: Flask, container: Container) -> None:
    courses = container.course_service

    @app.route("/api/courses", methods=["GET"], endpoint="courses_list")
    def courses_list():
        active_only = as_bool(request.args.get("active", "0"))
        return jsonify({"courses": courses.list_courses(active_only=active_only)})

    @app.route("/api/courses", methods=["POST"], endpoint="courses_create")
    def courses_create():
        data = payload()
        course_id = courses.create_course(
            current_user(),
            name=data.get("name"),
            description=data.get("description"),
            color=data.get("color"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
        )
        return written(201, id=course_id)

    @app.route("/api/courses/<int:course_id>", methods=["GET"], endpoint="courses_detail")
    def courses_detail(course_id: int):
        detail = found(courses.get_course_with_stats(course_id), "Course")
        return jsonify(
            {
                "course": detail.course,
                "student_count": detail.student_count,
                "lesson_count": detail.lesson_count,
                "lessons": container.lesson_service.list_lessons(course_id),
                "attendance_stats": container.attendance_service.attendance_stats(course_id=course_id).as_dict(),
            }
        )

    @app.route("/api/courses/<int:course_id>", methods=["PUT", "POST"], endpoint="courses_update")
    def courses_update(course_id: int):
        data = payload()
        courses.update_course(
            current_user(),
            course_id,
            name=data.get("name"),
            description=data.get("description"),
            color=data.get("color"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            is_active=as_bool(data.get("is_active", True)),
        )
        return written(id=course_id)

    @app.route("/api/courses/<int:course_id>/active", methods=["POST"], endpoint="courses_toggle_active")
    def courses_toggle_active(course_id: int):
        data = payload()
        courses.set_course_active(current_user(), course_id, as_bool(data.get("is_active", False)))
        return written(id=course_id)

    @app.route("/api/courses/<int:course_id>", methods=["DELETE"], endpoint="courses_delete")
    def courses_delete(course_id: int):
        courses.delete_course(current_user(), course_id)
        return written(id=course_id)
