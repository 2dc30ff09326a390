from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..container import Container
from ..users.guards import teacher_required


def register(app: Flask, container: Container) -> None:
    review = container.submission_review

    @app.route("/assignments/<assignment_id>/submissions", methods=["GET"], endpoint="list_submissions")
    @teacher_required
    def list_submissions(assignment_id: str):
        container.assignment_tracker.require(assignment_id)
        items = review.list_for_assignment(assignment_id)
        return jsonify({"success": True, "items": [asdict(s) for s in items]})

    @app.route("/submissions/<submission_id>/grade", methods=["POST"], endpoint="grade_submission")
    @teacher_required
    def grade_submission(submission_id: str):
        data = request.get_json(silent=True) or {}
        submission = review.grade(
            submission_id,
            grade=str(data.get("grade") or ""),
            feedback=str(data.get("feedback") or ""),
        )
        return jsonify({"success": True, "submission": asdict(submission)})
