from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.enums import Role


def _deny(message: str, code: int):
    return jsonify({"success": False, "message": message}), code


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "uid" not in session:
            return _deny("Please sign in to continue.", 401)
        return view(*args, **kwargs)

    return wrapper


def teacher_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "uid" not in session:
            return _deny("Please sign in to continue.", 401)
        if session.get("role") != Role.TEACHER.value:
            return _deny("This page is only available to teachers.", 403)
        return view(*args, **kwargs)

    return wrapper


def student_required(view):
    """Allow only students whose profile is linked to a roster entry."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "uid" not in session:
            return _deny("Please sign in to continue.", 401)
        if session.get("role") != Role.STUDENT.value:
            return _deny("This page is only available to students.", 403)
        if not session.get("student_id"):
            return _deny("Your student profile is not linked to the roster.", 403)
        return view(*args, **kwargs)

    return wrapper
