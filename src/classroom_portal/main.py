from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from .config import get_settings_module
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    DuplicateEmailError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from .database.bootstrap import apply_schema, list_tables
from .database.store import DocumentStore

from .container import build_container
from .assignments.controller import register as register_assignments
from .attendance.controller import register as register_attendance
from .reports.controller import register as register_reports
from .roster.controller import register as register_roster
from .submissions.controller import register as register_submissions
from .users.controller import register as register_users

_STATUS_CODES = (
    (DuplicateEmailError, 409),
    (ValidationError, 400),
    (NotFoundError, 404),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (StoreError, 503),
)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        for exc_type, code in _STATUS_CODES:
            if isinstance(e, exc_type):
                break
        else:
            code = 400
        if code == 503:
            app.logger.error("store failure: %s", e)
        return jsonify({"success": False, "message": str(e)}), code


def create_app(settings_module: Optional[str] = None, *, store: Optional[DocumentStore] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_LIFETIME_DAYS", 7)))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    backend = str(getattr(settings, "STORE_BACKEND", "memory"))
    db_config = getattr(settings, "DB_CONFIG", {})
    container = build_container(
        store=store,
        backend=backend,
        db_config=db_config,
        case_sensitive_emails=bool(getattr(settings, "EMAIL_CASE_SENSITIVE", True)),
    )

    if container.conn is not None:
        app.logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn)
            app.logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))
    else:
        app.logger.info("settings=%s store=%s", settings_module, backend if store is None else "injected")

    app.extensions["classroom_portal"] = container
    _register_error_handlers(app)

    register_users(app, container)
    register_roster(app, container)
    register_attendance(app, container)
    register_assignments(app, container)
    register_submissions(app, container)
    register_reports(app, container)

    return app


def run() -> None:
    app = create_app()
    app.run(debug=bool(app.config.get("DEBUG", False)))
