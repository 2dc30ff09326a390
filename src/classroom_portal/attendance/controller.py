from __future__ import annotations

from dataclasses import asdict
from datetime import date

from flask import Flask, jsonify, request, session

from ..container import Container
from ..core.exceptions import ValidationError
from ..users.guards import student_required, teacher_required
from .model import AttendanceDay


def _day_json(day: AttendanceDay) -> dict:
    return {
        "date": day.date,
        "records": {k: asdict(r) for k, r in day.records.items()},
        "summary": asdict(day.summary),
    }


def register(app: Flask, container: Container) -> None:
    ledger = container.attendance_ledger

    def _payload() -> dict:
        return request.get_json(silent=True) or {}

    @app.route("/attendance/<day>", methods=["GET"], endpoint="load_day")
    @teacher_required
    def load_day(day: str):
        return jsonify({"success": True, "day": _day_json(ledger.load_day(day))})

    @app.route("/attendance/<day>", methods=["POST"], endpoint="save_day")
    @teacher_required
    def save_day(day: str):
        edits = _payload().get("edits")
        if not isinstance(edits, dict):
            raise ValidationError("'edits' must map attendee ids to {status, note}")
        saved = ledger.save_day(day, {str(k): (v or {}) for k, v in edits.items()})
        return jsonify({"success": True, "day": _day_json(saved)})

    @app.route("/attendance/<day>/mark-all", methods=["POST"], endpoint="mark_all")
    @teacher_required
    def mark_all(day: str):
        data = _payload()
        saved = ledger.mark_all(day, data.get("status"), note=str(data.get("note") or ""))
        return jsonify({"success": True, "day": _day_json(saved)})

    @app.route("/me/attendance", methods=["GET"], endpoint="my_attendance")
    @student_required
    def my_attendance():
        student_id = session["student_id"]
        today = date.today()
        history = ledger.history_for_student(student_id)
        month = container.report_service.student_month_summary(student_id, today.year, today.month)
        return jsonify(
            {
                "success": True,
                "records": [asdict(r) for r in history],
                "month_summary": {
                    "present": month.present,
                    "absent": month.absent,
                    "leave": month.leave,
                    "percentage": month.percentage,
                },
            }
        )

    @app.route("/me/attendance/latest", methods=["GET"], endpoint="my_latest_attendance")
    @student_required
    def my_latest_attendance():
        record = ledger.latest_for_student(session["student_id"])
        return jsonify({"success": True, "record": asdict(record) if record else None})
