from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request, session

from ..container import Container
from ..core.exceptions import ValidationError
from ..reports.aggregation import assignment_status_counts
from ..users.guards import student_required, teacher_required
from .model import Assignment


def _assignment_json(a: Assignment, *, with_map: bool = True) -> dict:
    out = {
        "id": a.assignment_id,
        "title": a.title,
        "description": a.description,
        "due_date": a.due_date,
        "resource_url": a.resource_url,
        "created_at": a.created_at,
        "counts": assignment_status_counts(a),
    }
    if with_map:
        out["status_map"] = {k: asdict(e) for k, e in a.status_map.items()}
    return out


def register(app: Flask, container: Container) -> None:
    tracker = container.assignment_tracker

    def _payload() -> dict:
        return request.get_json(silent=True) or {}

    def _details(data: dict) -> dict:
        return {
            "title": str(data.get("title", "")),
            "due_date": str(data.get("due_date", "")),
            "description": str(data.get("description") or ""),
            "resource_url": str(data.get("resource_url") or ""),
        }

    @app.route("/assignments", methods=["GET"], endpoint="list_assignments")
    @teacher_required
    def list_assignments():
        descending = (request.args.get("order") or "asc").lower() == "desc"
        items = tracker.list(descending=descending)
        return jsonify({"success": True, "items": [_assignment_json(a, with_map=False) for a in items]})

    @app.route("/assignments", methods=["POST"], endpoint="create_assignment")
    @teacher_required
    def create_assignment():
        assignment = tracker.create(**_details(_payload()))
        return jsonify({"success": True, "assignment": _assignment_json(assignment)}), 201

    @app.route("/assignments/<assignment_id>", methods=["GET"], endpoint="get_assignment")
    @teacher_required
    def get_assignment(assignment_id: str):
        return jsonify({"success": True, "assignment": _assignment_json(tracker.require(assignment_id))})

    @app.route("/assignments/<assignment_id>", methods=["PUT"], endpoint="edit_assignment")
    @teacher_required
    def edit_assignment(assignment_id: str):
        assignment = tracker.edit(assignment_id, **_details(_payload()))
        return jsonify({"success": True, "assignment": _assignment_json(assignment)})

    @app.route("/assignments/<assignment_id>", methods=["DELETE"], endpoint="delete_assignment")
    @teacher_required
    def delete_assignment(assignment_id: str):
        tracker.delete(assignment_id)
        return jsonify({"success": True})

    @app.route("/assignments/<assignment_id>/sync", methods=["POST"], endpoint="sync_assignment")
    @teacher_required
    def sync_assignment(assignment_id: str):
        added = tracker.sync_roster(assignment_id)
        return jsonify(
            {
                "success": True,
                "added": added,
                "assignment": _assignment_json(tracker.require(assignment_id)),
            }
        )

    @app.route("/assignments/<assignment_id>/status-map", methods=["PUT"], endpoint="save_status_map")
    @teacher_required
    def save_status_map(assignment_id: str):
        status_map = _payload().get("status_map")
        if not isinstance(status_map, dict):
            raise ValidationError("'status_map' must map attendee ids to entries")
        assignment = tracker.save_status_map(assignment_id, {str(k): (v or {}) for k, v in status_map.items()})
        return jsonify({"success": True, "assignment": _assignment_json(assignment)})

    @app.route("/assignments/<assignment_id>/bulk-status", methods=["POST"], endpoint="bulk_status")
    @teacher_required
    def bulk_status(assignment_id: str):
        assignment = tracker.bulk_set_status(assignment_id, _payload().get("status"))
        return jsonify({"success": True, "assignment": _assignment_json(assignment)})

    @app.route("/me/assignments", methods=["GET"], endpoint="my_assignments")
    @student_required
    def my_assignments():
        items = tracker.list_for_student(session["student_id"])
        return jsonify(
            {
                "success": True,
                "items": [
                    {**_assignment_json(a, with_map=False), "my_status": asdict(entry)}
                    for a, entry in items
                ],
            }
        )

    @app.route("/me/assignments/pending", methods=["GET"], endpoint="my_pending_assignments")
    @student_required
    def my_pending_assignments():
        items = tracker.pending_for_student(session["student_id"])
        return jsonify({"success": True, "items": [_assignment_json(a, with_map=False) for a in items]})

    @app.route("/me/assignments/<assignment_id>/submit", methods=["POST"], endpoint="submit_assignment")
    @student_required
    def submit_assignment(assignment_id: str):
        submission = tracker.student_submit(
            assignment_id,
            session["student_id"],
            note=str(_payload().get("note") or ""),
            student_email=session.get("email", ""),
        )
        return jsonify({"success": True, "submission": asdict(submission)})
