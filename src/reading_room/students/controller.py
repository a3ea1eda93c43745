from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request

from ..core.constants import ALERT_SENT_MESSAGE
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.student_service

    def json_errors(view):
        """Translate domain errors into JSON responses; nothing escapes as a crash."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"error": str(e)}), 400
            except NotFoundError as e:
                return jsonify({"error": str(e)}), 404
            except Exception as e:
                logger.exception("Unhandled error in %s", request.path)
                return jsonify({"error": str(e) or "Server error"}), 500

        return wrapper

    def _body() -> dict:
        data = request.get_json(silent=True)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    @app.route("/students", methods=["GET"], endpoint="list_students")
    @json_errors
    def list_students():
        return jsonify([s.to_dict() for s in service.list_all()])

    @app.route("/students/<seat>/history", methods=["GET"], endpoint="student_history")
    @json_errors
    def student_history(seat: str):
        return jsonify([e.to_dict() for e in service.get_history(seat)])

    @app.route("/students", methods=["POST"], endpoint="upsert_student")
    @json_errors
    def upsert_student():
        data = _body()
        record = service.upsert(
            seat=data.get("seat"),
            name=data.get("name"),
            mobile=data.get("mobile"),
            join_date=data.get("joinDate"),
            fee=data.get("fee"),
            attendance=data.get("attendance"),
            fee_paid=data.get("feePaid"),
            shift=data.get("shift"),
        )
        return jsonify(record.to_dict())

    @app.route("/students/<seat>/attendance", methods=["PATCH"], endpoint="toggle_attendance")
    @json_errors
    def toggle_attendance(seat: str):
        return jsonify(service.toggle_attendance(seat).to_dict())

    @app.route("/students/<seat>/payment/<month>", methods=["PATCH"], endpoint="toggle_payment")
    @json_errors
    def toggle_payment(seat: str, month: str):
        return jsonify(service.toggle_payment(seat, month).to_dict())

    @app.route("/students/<seat>/fee-history", methods=["PATCH"], endpoint="set_fee_history")
    @json_errors
    def set_fee_history(seat: str):
        data = _body()
        record = service.set_fee_history(seat, data.get("month"), data.get("paid"))
        return jsonify(record.to_dict())

    @app.route("/students/<seat>/send-alert", methods=["POST"], endpoint="send_alert")
    @json_errors
    def send_alert(seat: str):
        result = service.send_alert(seat, _body().get("customMessage"))
        if not result.success:
            return jsonify({"success": False, "error": result.error}), 500
        return jsonify({"success": True, "message": ALERT_SENT_MESSAGE})

    @app.route("/students/<seat>", methods=["DELETE"], endpoint="delete_student")
    @json_errors
    def delete_student(seat: str):
        service.delete(seat)
        return jsonify({"message": "Deleted successfully"})

    @app.route("/students/<seat>/pay", methods=["POST"], endpoint="record_payment")
    @json_errors
    def record_payment(seat: str):
        data = _body()
        record = service.record_payment(seat, data.get("month"), data.get("amount"))
        return jsonify({"success": True, "student": record.to_dict()})
