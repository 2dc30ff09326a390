from __future__ import annotations

import logging
from dataclasses import replace
from typing import Mapping, Optional, Sequence, Union

from ..common.datetime_utils import timestamp
from ..common.validators import require_date_key, require_non_empty
from ..core.constants import DEFAULT_PENDING_LIMIT
from ..core.enums import AssignmentStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..roster.model import Attendee
from ..roster.repository import AttendeeRepository
from ..submissions.model import Submission
from ..submissions.repository import SubmissionRepository
from .model import Assignment, StatusEntry
from .repository import AssignmentRepository

logger = logging.getLogger(__name__)

EntryInput = Union[StatusEntry, Mapping[str, object]]


def _coerce_status(value) -> AssignmentStatus:
    try:
        return AssignmentStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown assignment status: {value!r}") from None


def _fresh_entry(attendee: Attendee, now: str) -> StatusEntry:
    return StatusEntry(
        attendee_id=attendee.attendee_id,
        attendee_name=attendee.name,
        email=attendee.email,
        status=AssignmentStatus.ASSIGNED,
        updated_at=now,
    )


def _coerce_entry(value: EntryInput, original: StatusEntry) -> StatusEntry:
    if isinstance(value, StatusEntry):
        return value
    if not isinstance(value, Mapping):
        raise ValidationError("Each status map entry must be an object")
    return replace(
        original,
        status=_coerce_status(value.get("status", original.status)),
        grade=str(value.get("grade", original.grade) or ""),
        note=str(value.get("note", original.note) or ""),
        file_url=str(value.get("file_url", original.file_url) or ""),
        file_name=str(value.get("file_name", original.file_name) or ""),
    )


class AssignmentTracker:
    """Use case: create assignments and track each student's progress.

    The status map is a roster snapshot taken at creation time; later roster
    additions only appear after an explicit ``sync_roster``. Entries are never
    removed automatically.
    """

    def __init__(
        self,
        assignments: AssignmentRepository,
        attendees: AttendeeRepository,
        submissions: SubmissionRepository,
    ):
        self._assignments = assignments
        self._attendees = attendees
        self._submissions = submissions

    def get(self, assignment_id: str) -> Optional[Assignment]:
        return self._assignments.get(assignment_id)

    def require(self, assignment_id: str) -> Assignment:
        assignment = self._assignments.get(assignment_id)
        if not assignment:
            raise NotFoundError("Assignment not found")
        return assignment

    def list(self, *, descending: bool = False) -> Sequence[Assignment]:
        return self._assignments.list(descending=descending)

    def create(self, *, title: str, due_date: str, description: str = "", resource_url: str = "") -> Assignment:
        title = require_non_empty(title, "Title")
        due_date = require_date_key(due_date, "Due date")

        now = timestamp()
        status_map = {a.attendee_id: _fresh_entry(a, now) for a in self._attendees.list_active()}
        assignment_id = self._assignments.create(
            title=title,
            due_date=due_date,
            description=description or "",
            resource_url=resource_url or "",
            created_at=now,
            status_map=status_map,
        )
        logger.info("assignment %s created for %d attendee(s)", assignment_id, len(status_map))
        return Assignment(
            assignment_id=assignment_id,
            title=title,
            due_date=due_date,
            description=description or "",
            resource_url=resource_url or "",
            created_at=now,
            status_map=status_map,
        )

    def edit(
        self,
        assignment_id: str,
        *,
        title: str,
        due_date: str,
        description: str = "",
        resource_url: str = "",
    ) -> Assignment:
        """Change the details only; student statuses are not affected."""
        title = require_non_empty(title, "Title")
        due_date = require_date_key(due_date, "Due date")
        self.require(assignment_id)
        self._assignments.update_details(
            assignment_id,
            title=title,
            due_date=due_date,
            description=description or "",
            resource_url=resource_url or "",
        )
        return self.require(assignment_id)

    def delete(self, assignment_id: str) -> None:
        self.require(assignment_id)
        self._assignments.delete(assignment_id)
        logger.info("assignment %s deleted", assignment_id)

    def sync_roster(self, assignment_id: str) -> int:
        """Add an ``Assigned`` entry for every active attendee missing from the map.

        Existing entries are left untouched; nothing is written when the map
        is already in sync. Returns the number of entries added.
        """
        assignment = self.require(assignment_id)
        now = timestamp()
        missing = {
            a.attendee_id: _fresh_entry(a, now)
            for a in self._attendees.list_active()
            if a.attendee_id not in assignment.status_map
        }
        if missing:
            self._assignments.add_entries(assignment_id, missing)
            logger.info("assignment %s synced: %d new attendee(s)", assignment_id, len(missing))
        return len(missing)

    def save_status_map(self, assignment_id: str, status_map: Mapping[str, EntryInput]) -> Assignment:
        """Replace the status map.

        Only entries whose content changed get a fresh ``updated_at``. Ids that
        are not already in the map are rejected (use ``sync_roster``); entries
        left out of ``status_map`` are kept as they are.
        """
        assignment = self.require(assignment_id)

        unknown = sorted(k for k in status_map if k not in assignment.status_map)
        if unknown:
            raise ValidationError(f"Not assigned: {', '.join(unknown)}")

        now = timestamp()
        merged: dict[str, StatusEntry] = dict(assignment.status_map)
        for student_id, value in status_map.items():
            original = assignment.status_map[student_id]
            entry = _coerce_entry(value, original)
            if entry.content() != original.content():
                entry = replace(entry, updated_at=now)
            else:
                entry = original
            merged[student_id] = entry

        self._assignments.replace_status_map(assignment_id, merged)
        return replace(assignment, status_map=merged)

    def bulk_set_status(self, assignment_id: str, status: AssignmentStatus) -> Assignment:
        status = _coerce_status(status)
        assignment = self.require(assignment_id)
        new_map = {k: replace(e, status=status) for k, e in assignment.status_map.items()}
        return self.save_status_map(assignment_id, new_map)

    def student_submit(
        self,
        assignment_id: str,
        student_id: str,
        *,
        note: str = "",
        student_email: str = "",
    ) -> Submission:
        """Create/update the student's submission and flag their entry ``Submitted``.

        Both documents are written in one atomic batch; any previously
        attached file reference on the entry is cleared.
        """
        assignment = self.require(assignment_id)
        entry = assignment.status_map.get(student_id)
        if not entry:
            raise ValidationError("You are not assigned to this assignment")
        if entry.status == AssignmentStatus.GRADED:
            raise ValidationError("This assignment has already been graded")

        submission_id = self._submissions.record_submission(
            assignment_id=assignment_id,
            student_id=student_id,
            student_email=student_email or entry.email,
            notes=note or "",
            submitted_at=timestamp(),
        )
        logger.info("assignment %s submitted by %s", assignment_id, student_id)
        submission = self._submissions.get(submission_id)
        if not submission:
            raise NotFoundError("Submission not found")
        return submission

    def pending_for_student(self, student_id: str, *, limit: int = DEFAULT_PENDING_LIMIT) -> Sequence[Assignment]:
        """Assignments the student still has to hand in or that await grading."""
        return self._assignments.list_by_student_status(
            student_id,
            [AssignmentStatus.ASSIGNED, AssignmentStatus.SUBMITTED],
            limit=limit,
        )

    def list_for_student(self, student_id: str) -> list[tuple[Assignment, StatusEntry]]:
        return [
            (a, a.status_map[student_id])
            for a in self._assignments.list(descending=True)
            if student_id in a.status_map
        ]
