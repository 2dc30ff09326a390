from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ArchivedAttendee, Attendee


class AttendeeRepository(Protocol):
    """Repository interface for active and archived attendees.

    Note (DIP): the service layer depends on this interface, not on a concrete store.
    """

    def get(self, attendee_id: str) -> Optional[Attendee]:
        raise NotImplementedError

    def get_archived(self, archive_id: str) -> Optional[ArchivedAttendee]:
        raise NotImplementedError

    def list_active(self, *, descending: bool = False) -> Sequence[Attendee]:
        raise NotImplementedError

    def list_archived(self, *, descending: bool = True) -> Sequence[ArchivedAttendee]:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError

    def find_active_by_email(self, email: str) -> Sequence[Attendee]:
        raise NotImplementedError

    def find_archived_by_email(self, email: str) -> Sequence[ArchivedAttendee]:
        raise NotImplementedError

    def create(self, *, name: str, email: str, created_at: str) -> str:
        raise NotImplementedError

    def update(self, attendee_id: str, *, name: str, email: str) -> None:
        raise NotImplementedError

    def archive(self, attendee: Attendee, *, deleted_at: str) -> None:
        """Copy into the archive and remove the active entry, atomically."""

        raise NotImplementedError

    def restore(self, archived: ArchivedAttendee, *, restored_at: str) -> Attendee:
        """Recreate the active entry under ``original_id`` and drop the archive entry, atomically."""

        raise NotImplementedError

    def delete(self, attendee_id: str) -> None:
        raise NotImplementedError
