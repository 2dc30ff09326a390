from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request, session

from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .guards import login_required
from .model import ResolvedIdentity


def _identity_json(identity: ResolvedIdentity) -> dict:
    return {
        "uid": identity.principal.uid,
        "email": identity.principal.email,
        "role": identity.role.value,
        "profile": asdict(identity.profile),
        "student": asdict(identity.student) if identity.student else None,
    }


def register(app: Flask, container: Container) -> None:
    def _payload() -> dict:
        return request.get_json(silent=True) or {}

    def _role(value) -> Role:
        try:
            return Role(value or Role.STUDENT.value)
        except ValueError:
            raise ValidationError("Role must be 'teacher' or 'student'") from None

    def _start_session(identity: ResolvedIdentity, *, remember: bool) -> None:
        session.clear()
        session.permanent = bool(remember)
        session["uid"] = identity.principal.uid
        session["email"] = identity.principal.email
        session["role"] = identity.role.value
        if identity.student:
            session["student_id"] = identity.student.attendee_id

    @app.route("/auth/signup", methods=["POST"], endpoint="signup")
    def signup():
        data = _payload()
        identity = container.account_service.sign_up(
            email=str(data.get("email", "")),
            password=str(data.get("password", "")),
            role=_role(data.get("role")),
        )
        _start_session(identity, remember=False)
        return jsonify({"success": True, "user": _identity_json(identity)}), 201

    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = _payload()
        identity = container.account_service.sign_in(
            email=str(data.get("email", "")),
            password=str(data.get("password", "")),
            role=_role(data.get("role")),
        )
        _start_session(identity, remember=bool(data.get("remember_me")))
        app.logger.info("%s %s signed in", identity.role.value, identity.principal.uid)
        return jsonify({"success": True, "user": _identity_json(identity)})

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        principal = container.auth_provider.get_principal(session["uid"])
        identity = container.identity_resolver.resolve(principal)
        if not identity:
            session.clear()
            return jsonify({"success": False, "message": "Session is no longer valid."}), 401

        # keep the session in step with a link that broke or was healed
        if identity.student:
            session["student_id"] = identity.student.attendee_id
        else:
            session.pop("student_id", None)
        return jsonify({"success": True, "user": _identity_json(identity)})
