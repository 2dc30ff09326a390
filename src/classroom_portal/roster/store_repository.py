from __future__ import annotations

from typing import Optional, Sequence

from ..core import constants
from ..database.store import DocumentStore, Filter
from .model import ArchivedAttendee, Attendee
from .repository import AttendeeRepository


def _to_attendee(doc_id: str, data: dict) -> Attendee:
    return Attendee(
        attendee_id=doc_id,
        name=data.get("name", ""),
        email=data.get("email", ""),
        created_at=data.get("created_at"),
        restored_at=data.get("restored_at"),
    )


def _to_archived(doc_id: str, data: dict) -> ArchivedAttendee:
    return ArchivedAttendee(
        archive_id=doc_id,
        original_id=data.get("original_id") or doc_id,
        name=data.get("name", ""),
        email=data.get("email", ""),
        deleted_at=data.get("deleted_at", ""),
        created_at=data.get("created_at"),
    )


class StoreAttendeeRepository(AttendeeRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get(self, attendee_id: str) -> Optional[Attendee]:
        data = self._store.get(constants.ATTENDEES, attendee_id)
        return _to_attendee(attendee_id, data) if data is not None else None

    def get_archived(self, archive_id: str) -> Optional[ArchivedAttendee]:
        data = self._store.get(constants.DELETED_ATTENDEES, archive_id)
        return _to_archived(archive_id, data) if data is not None else None

    def list_active(self, *, descending: bool = False) -> Sequence[Attendee]:
        docs = self._store.query(constants.ATTENDEES, order_by="name", descending=descending)
        return [_to_attendee(d.id, d.data) for d in docs]

    def list_archived(self, *, descending: bool = True) -> Sequence[ArchivedAttendee]:
        docs = self._store.query(constants.DELETED_ATTENDEES, order_by="deleted_at", descending=descending)
        return [_to_archived(d.id, d.data) for d in docs]

    def count_active(self) -> int:
        return self._store.count(constants.ATTENDEES)

    def find_active_by_email(self, email: str) -> Sequence[Attendee]:
        docs = self._store.query(constants.ATTENDEES, [Filter("email", "==", email)])
        return [_to_attendee(d.id, d.data) for d in docs]

    def find_archived_by_email(self, email: str) -> Sequence[ArchivedAttendee]:
        docs = self._store.query(constants.DELETED_ATTENDEES, [Filter("email", "==", email)])
        return [_to_archived(d.id, d.data) for d in docs]

    def create(self, *, name: str, email: str, created_at: str) -> str:
        return self._store.add(constants.ATTENDEES, {"name": name, "email": email, "created_at": created_at})

    def update(self, attendee_id: str, *, name: str, email: str) -> None:
        self._store.update(constants.ATTENDEES, attendee_id, {"name": name, "email": email})

    def archive(self, attendee: Attendee, *, deleted_at: str) -> None:
        payload = {
            "original_id": attendee.attendee_id,
            "name": attendee.name,
            "email": attendee.email,
            "deleted_at": deleted_at,
        }
        if attendee.created_at:
            payload["created_at"] = attendee.created_at

        batch = self._store.batch()
        batch.set(constants.DELETED_ATTENDEES, attendee.attendee_id, payload)
        batch.delete(constants.ATTENDEES, attendee.attendee_id)
        batch.commit()

    def restore(self, archived: ArchivedAttendee, *, restored_at: str) -> Attendee:
        restored = Attendee(
            attendee_id=archived.original_id,
            name=archived.name,
            email=archived.email,
            created_at=archived.created_at or restored_at,
            restored_at=restored_at,
        )
        batch = self._store.batch()
        batch.set(
            constants.ATTENDEES,
            restored.attendee_id,
            {
                "name": restored.name,
                "email": restored.email,
                "created_at": restored.created_at,
                "restored_at": restored.restored_at,
            },
        )
        batch.delete(constants.DELETED_ATTENDEES, archived.archive_id)
        batch.commit()
        return restored

    def delete(self, attendee_id: str) -> None:
        self._store.delete(constants.ATTENDEES, attendee_id)
