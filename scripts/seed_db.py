from __future__ import annotations

import importlib
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from dotenv import load_dotenv

from classroom_portal.config import get_settings_module
from classroom_portal.container import build_container
from classroom_portal.core.enums import Role

DEMO_TEACHER = ("teacher@example.com", "teacher123")
DEMO_ROSTER = [
    ("An Nguyen", "an.nguyen@example.com"),
    ("Binh Tran", "binh.tran@example.com"),
    ("Chi Le", "chi.le@example.com"),
]


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        backend=str(getattr(settings, "STORE_BACKEND", "memory")),
        db_config=dict(settings.DB_CONFIG),
        case_sensitive_emails=bool(getattr(settings, "EMAIL_CASE_SENSITIVE", True)),
    )

    email, password = DEMO_TEACHER
    if not container.auth_provider.is_registered(email):
        container.account_service.sign_up(email=email, password=password, role=Role.TEACHER)

    added = 0
    for name, student_email in DEMO_ROSTER:
        if container.roster_service.find_by_email(student_email):
            continue
        container.roster_service.add(name=name, email=student_email)
        added += 1

    print(f"OK: Seeded demo data (teacher={email}, attendees added={added})")


if __name__ == "__main__":
    main()
