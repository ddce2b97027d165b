from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_user, payload, written
from ..container import Container


def register(app: Flask, container: Container) -> None:
    emails = container.email_service

    @app.route("/api/students/<int:student_id>/emails", methods=["GET"], endpoint="emails_list")
    def emails_list(student_id: int):
        return jsonify({"emails": emails.get_email_logs(student_id)})

    @app.route("/api/students/<int:student_id>/emails", methods=["POST"], endpoint="emails_send")
    def emails_send(student_id: int):
        data = payload()
        result = emails.send_student_email(
            current_user(),
            student_id,
            subject=data.get("subject"),
            body=data.get("body"),
        )
        if not result.success:
            return written(400, success=False, error=result.error)
        return written(success=True)
