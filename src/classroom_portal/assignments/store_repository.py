from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..core import constants
from ..core.enums import AssignmentStatus
from ..database.store import DocumentStore, Filter
from .model import Assignment, StatusEntry
from .repository import AssignmentRepository


def _entry_to_doc(e: StatusEntry) -> dict:
    return {
        "attendee_id": e.attendee_id,
        "attendee_name": e.attendee_name,
        "email": e.email,
        "status": e.status.value,
        "grade": e.grade,
        "note": e.note,
        "file_url": e.file_url,
        "file_name": e.file_name,
        "updated_at": e.updated_at,
    }


def _to_entry(attendee_id: str, raw: dict) -> StatusEntry:
    return StatusEntry(
        attendee_id=raw.get("attendee_id") or attendee_id,
        attendee_name=raw.get("attendee_name") or "",
        email=raw.get("email") or "",
        status=AssignmentStatus(raw.get("status") or AssignmentStatus.ASSIGNED.value),
        grade=raw.get("grade") or "",
        note=raw.get("note") or "",
        file_url=raw.get("file_url") or "",
        file_name=raw.get("file_name") or "",
        updated_at=raw.get("updated_at"),
    )


def _to_assignment(doc_id: str, data: dict) -> Assignment:
    return Assignment(
        assignment_id=doc_id,
        title=data.get("title", ""),
        due_date=data.get("due_date", ""),
        description=data.get("description") or "",
        resource_url=data.get("resource_url") or "",
        created_at=data.get("created_at"),
        status_map={k: _to_entry(k, v) for k, v in (data.get("status_map") or {}).items()},
    )


class StoreAssignmentRepository(AssignmentRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get(self, assignment_id: str) -> Optional[Assignment]:
        data = self._store.get(constants.ASSIGNMENTS, assignment_id)
        return _to_assignment(assignment_id, data) if data is not None else None

    def list(self, *, descending: bool = False, limit: Optional[int] = None) -> Sequence[Assignment]:
        docs = self._store.query(constants.ASSIGNMENTS, order_by="due_date", descending=descending, limit=limit)
        return [_to_assignment(d.id, d.data) for d in docs]

    def list_by_student_status(
        self,
        student_id: str,
        statuses: Sequence[AssignmentStatus],
        *,
        limit: Optional[int] = None,
    ) -> Sequence[Assignment]:
        docs = self._store.query(
            constants.ASSIGNMENTS,
            [Filter(f"status_map.{student_id}.status", "in", [s.value for s in statuses])],
            limit=limit,
        )
        return [_to_assignment(d.id, d.data) for d in docs]

    def create(
        self,
        *,
        title: str,
        due_date: str,
        description: str,
        resource_url: str,
        created_at: str,
        status_map: Mapping[str, StatusEntry],
    ) -> str:
        return self._store.add(
            constants.ASSIGNMENTS,
            {
                "title": title,
                "due_date": due_date,
                "description": description,
                "resource_url": resource_url,
                "created_at": created_at,
                "status_map": {k: _entry_to_doc(e) for k, e in status_map.items()},
            },
        )

    def update_details(
        self,
        assignment_id: str,
        *,
        title: str,
        due_date: str,
        description: str,
        resource_url: str,
    ) -> None:
        self._store.update(
            constants.ASSIGNMENTS,
            assignment_id,
            {"title": title, "due_date": due_date, "description": description, "resource_url": resource_url},
        )

    def add_entries(self, assignment_id: str, entries: Mapping[str, StatusEntry]) -> None:
        if not entries:
            return
        self._store.update(
            constants.ASSIGNMENTS,
            assignment_id,
            {f"status_map.{k}": _entry_to_doc(e) for k, e in entries.items()},
        )

    def replace_status_map(self, assignment_id: str, status_map: Mapping[str, StatusEntry]) -> None:
        self._store.update(
            constants.ASSIGNMENTS,
            assignment_id,
            {"status_map": {k: _entry_to_doc(e) for k, e in status_map.items()}},
        )

    def delete(self, assignment_id: str) -> None:
        self._store.delete(constants.ASSIGNMENTS, assignment_id)
