from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.datetime_utils import timestamp
from ..common.validators import require_email, require_non_empty
from ..core.exceptions import DuplicateEmailError, NotFoundError
from .model import ArchivedAttendee, Attendee
from .repository import AttendeeRepository

logger = logging.getLogger(__name__)


class RosterService:
    """Use case: manage the roster of attendees (teacher).

    E-mail uniqueness spans active AND archived attendees, so an archived
    e-mail cannot be reused until the archived entry is restored.
    Comparison is an exact (case-sensitive) match unless
    ``case_sensitive_emails`` is turned off.
    """

    def __init__(self, attendees: AttendeeRepository, *, case_sensitive_emails: bool = True):
        self._attendees = attendees
        self._case_sensitive = bool(case_sensitive_emails)

    def _same_email(self, a: str, b: str) -> bool:
        if self._case_sensitive:
            return a == b
        return a.casefold() == b.casefold()

    def _active_matches(self, email: str) -> Sequence[Attendee]:
        if self._case_sensitive:
            return self._attendees.find_active_by_email(email)
        return [a for a in self._attendees.list_active() if self._same_email(a.email, email)]

    def _archived_matches(self, email: str) -> Sequence[ArchivedAttendee]:
        if self._case_sensitive:
            return self._attendees.find_archived_by_email(email)
        return [a for a in self._attendees.list_archived() if self._same_email(a.email, email)]

    def get(self, attendee_id: str) -> Optional[Attendee]:
        return self._attendees.get(attendee_id)

    def require(self, attendee_id: str) -> Attendee:
        attendee = self._attendees.get(attendee_id)
        if not attendee:
            raise NotFoundError("Attendee not found")
        return attendee

    def list_active(self, *, descending: bool = False) -> Sequence[Attendee]:
        return self._attendees.list_active(descending=descending)

    def list_archived(self, *, descending: bool = True) -> Sequence[ArchivedAttendee]:
        return self._attendees.list_archived(descending=descending)

    def count_active(self) -> int:
        return self._attendees.count_active()

    def find_by_email(self, email: str) -> Optional[Attendee]:
        matches = self._active_matches(email)
        return matches[0] if matches else None

    def add(self, *, name: str, email: str) -> Attendee:
        name = require_non_empty(name, "Name")
        email = require_email(email)

        if self._active_matches(email) or self._archived_matches(email):
            raise DuplicateEmailError("This email address is already in use by an active or deleted attendee.")

        created_at = timestamp()
        attendee_id = self._attendees.create(name=name, email=email, created_at=created_at)
        logger.info("attendee %s added", attendee_id)
        return Attendee(attendee_id=attendee_id, name=name, email=email, created_at=created_at)

    def edit(self, attendee_id: str, *, name: str, email: str) -> Attendee:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        current = self.require(attendee_id)

        clash = any(a.attendee_id != attendee_id for a in self._active_matches(email))
        if clash or self._archived_matches(email):
            raise DuplicateEmailError("This email address is already in use by an active or deleted attendee.")

        self._attendees.update(attendee_id, name=name, email=email)
        return Attendee(
            attendee_id=attendee_id,
            name=name,
            email=email,
            created_at=current.created_at,
            restored_at=current.restored_at,
        )

    def soft_delete(self, attendee_id: str) -> ArchivedAttendee:
        """Move an attendee to the archive.

        Attendance and assignment records keep the id and the name/email
        captured when they were written.
        """
        attendee = self.require(attendee_id)
        deleted_at = timestamp()
        self._attendees.archive(attendee, deleted_at=deleted_at)
        logger.info("attendee %s archived", attendee_id)
        return ArchivedAttendee(
            archive_id=attendee.attendee_id,
            original_id=attendee.attendee_id,
            name=attendee.name,
            email=attendee.email,
            deleted_at=deleted_at,
            created_at=attendee.created_at,
        )

    def restore(self, archive_id: str) -> Attendee:
        archived = self._attendees.get_archived(archive_id)
        if not archived:
            raise NotFoundError("Archived attendee not found")

        if self._active_matches(archived.email):
            raise DuplicateEmailError("An attendee with this email already exists in the active list.")

        restored = self._attendees.restore(archived, restored_at=timestamp())
        logger.info("attendee %s restored", restored.attendee_id)
        return restored

    def discard(self, attendee_id: str) -> None:
        """Remove an attendee outright, without archiving.

        Only for rolling back an entry added moments ago by a sign-up that
        did not complete; teachers use ``soft_delete``.
        """
        self._attendees.delete(attendee_id)
        logger.info("attendee %s discarded", attendee_id)
