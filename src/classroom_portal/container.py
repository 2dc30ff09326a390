from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .assignments.service import AssignmentTracker
from .assignments.store_repository import StoreAssignmentRepository
from .attendance.service import AttendanceLedger
from .attendance.store_repository import StoreAttendanceRepository
from .database.connection import DBConfig, DatabaseConnection
from .database.memory_store import InMemoryDocumentStore
from .database.mysql_store import MySQLDocumentStore
from .database.store import DocumentStore
from .reports.service import ReportService
from .roster.service import RosterService
from .roster.store_repository import StoreAttendeeRepository
from .submissions.service import SubmissionReview
from .submissions.store_repository import StoreSubmissionRepository
from .users.auth import PasswordAuthProvider
from .users.service import AccountService, IdentityResolver
from .users.store_repository import StoreCredentialRepository, StoreUserProfileRepository


@dataclass(frozen=True)
class Container:
    store: DocumentStore
    conn: Optional[DatabaseConnection]

    attendees_repo: StoreAttendeeRepository
    profiles_repo: StoreUserProfileRepository
    credentials_repo: StoreCredentialRepository
    attendance_repo: StoreAttendanceRepository
    assignments_repo: StoreAssignmentRepository
    submissions_repo: StoreSubmissionRepository

    auth_provider: PasswordAuthProvider
    identity_resolver: IdentityResolver
    account_service: AccountService
    roster_service: RosterService
    attendance_ledger: AttendanceLedger
    assignment_tracker: AssignmentTracker
    submission_review: SubmissionReview
    report_service: ReportService


def build_store(*, backend: str, db_config: Optional[dict] = None) -> tuple[DocumentStore, Optional[DatabaseConnection]]:
    backend = (backend or "memory").lower()
    if backend == "memory":
        return InMemoryDocumentStore(), None
    if backend == "mysql":
        conn = DatabaseConnection(DBConfig.from_dict(db_config or {}))
        return MySQLDocumentStore(conn), conn
    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")


def build_container(
    *,
    store: Optional[DocumentStore] = None,
    backend: str = "memory",
    db_config: Optional[dict] = None,
    case_sensitive_emails: bool = True,
) -> Container:
    conn: Optional[DatabaseConnection] = None
    if store is None:
        store, conn = build_store(backend=backend, db_config=db_config)

    attendees_repo = StoreAttendeeRepository(store)
    profiles_repo = StoreUserProfileRepository(store)
    credentials_repo = StoreCredentialRepository(store)
    attendance_repo = StoreAttendanceRepository(store)
    assignments_repo = StoreAssignmentRepository(store)
    submissions_repo = StoreSubmissionRepository(store)

    auth_provider = PasswordAuthProvider(credentials_repo)
    identity_resolver = IdentityResolver(profiles_repo, attendees_repo)
    roster_service = RosterService(attendees_repo, case_sensitive_emails=case_sensitive_emails)
    account_service = AccountService(auth_provider, profiles_repo, roster_service, identity_resolver)
    attendance_ledger = AttendanceLedger(attendance_repo, attendees_repo)
    assignment_tracker = AssignmentTracker(assignments_repo, attendees_repo, submissions_repo)
    submission_review = SubmissionReview(submissions_repo)
    report_service = ReportService(attendance_ledger, attendees_repo)

    return Container(
        store=store,
        conn=conn,
        attendees_repo=attendees_repo,
        profiles_repo=profiles_repo,
        credentials_repo=credentials_repo,
        attendance_repo=attendance_repo,
        assignments_repo=assignments_repo,
        submissions_repo=submissions_repo,
        auth_provider=auth_provider,
        identity_resolver=identity_resolver,
        account_service=account_service,
        roster_service=roster_service,
        attendance_ledger=attendance_ledger,
        assignment_tracker=assignment_tracker,
        submission_review=submission_review,
        report_service=report_service,
    )
