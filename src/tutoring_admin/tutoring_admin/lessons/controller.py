from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user, found, payload, written
from ..container import Container


def register(app: Flask, container: Container) -> None:
    lessons = container.lesson_service

    @app.route("/api/courses/<int:course_id>/lessons", methods=["GET"], endpoint="lessons_list")
    def lessons_list(course_id: int):
        return jsonify({"lessons": lessons.list_lessons(course_id)})

    @app.route("/api/courses/<int:course_id>/lessons", methods=["POST"], endpoint="lessons_create")
    def lessons_create(course_id: int):
        data = payload()
        lesson_id = lessons.create_lesson(
            current_user(),
            course_id,
            title=data.get("title"),
            lesson_date=data.get("lesson_date"),
            lesson_time=data.get("lesson_time"),
            duration_minutes=data.get("duration_minutes"),
            description=data.get("description"),
            location=data.get("location"),
        )
        return written(201, id=lesson_id)

    @app.route("/api/lessons/upcoming", methods=["GET"], endpoint="lessons_upcoming")
    def lessons_upcoming():
        limit = request.args.get("limit", type=int) or 5
        return jsonify({"lessons": lessons.upcoming_lessons(limit=limit)})

    @app.route("/api/lessons/<int:lesson_id>", methods=["GET"], endpoint="lessons_detail")
    def lessons_detail(lesson_id: int):
        detail = found(lessons.get_lesson(lesson_id), "Lesson")
        return jsonify({"lesson": detail.lesson, "course": detail.course})

    @app.route("/api/lessons/<int:lesson_id>", methods=["PUT", "POST"], endpoint="lessons_update")
    def lessons_update(lesson_id: int):
        data = payload()
        lessons.update_lesson(
            current_user(),
            lesson_id,
            title=data.get("title"),
            lesson_date=data.get("lesson_date"),
            lesson_time=data.get("lesson_time"),
            duration_minutes=data.get("duration_minutes"),
            description=data.get("description"),
            location=data.get("location"),
        )
        return written(id=lesson_id)

    @app.route("/api/lessons/<int:lesson_id>", methods=["DELETE"], endpoint="lessons_delete")
    def lessons_delete(lesson_id: int):
        lessons.delete_lesson(current_user(), lesson_id)
        return written(id=lesson_id)
