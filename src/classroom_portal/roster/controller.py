from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..container import Container
from ..users.guards import teacher_required


def register(app: Flask, container: Container) -> None:
    roster = container.roster_service

    def _payload() -> dict:
        return request.get_json(silent=True) or {}

    def _descending(default: bool) -> bool:
        order = request.args.get("order")
        if order is None:
            return default
        return order.lower() == "desc"

    @app.route("/attendees", methods=["GET"], endpoint="list_attendees")
    @teacher_required
    def list_attendees():
        if request.args.get("view") == "deleted":
            items = roster.list_archived(descending=_descending(True))
        else:
            items = roster.list_active(descending=_descending(False))
        return jsonify({"success": True, "items": [asdict(a) for a in items]})

    @app.route("/attendees/count", methods=["GET"], endpoint="count_attendees")
    @teacher_required
    def count_attendees():
        return jsonify({"success": True, "count": roster.count_active()})

    @app.route("/attendees", methods=["POST"], endpoint="add_attendee")
    @teacher_required
    def add_attendee():
        data = _payload()
        attendee = roster.add(name=str(data.get("name", "")), email=str(data.get("email", "")))
        return jsonify({"success": True, "attendee": asdict(attendee)}), 201

    @app.route("/attendees/<attendee_id>", methods=["PUT"], endpoint="edit_attendee")
    @teacher_required
    def edit_attendee(attendee_id: str):
        data = _payload()
        attendee = roster.edit(attendee_id, name=str(data.get("name", "")), email=str(data.get("email", "")))
        return jsonify({"success": True, "attendee": asdict(attendee)})

    @app.route("/attendees/<attendee_id>", methods=["DELETE"], endpoint="delete_attendee")
    @teacher_required
    def delete_attendee(attendee_id: str):
        archived = roster.soft_delete(attendee_id)
        return jsonify({"success": True, "archived": asdict(archived)})

    @app.route("/attendees/archived/<archive_id>/restore", methods=["POST"], endpoint="restore_attendee")
    @teacher_required
    def restore_attendee(archive_id: str):
        attendee = roster.restore(archive_id)
        return jsonify({"success": True, "attendee": asdict(attendee)})
