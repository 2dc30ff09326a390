from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import AssignmentStatus


@dataclass(frozen=True)
class StatusEntry:
    """One student's progress on an assignment (a value of the status map)."""

    attendee_id: str
    attendee_name: str
    email: str
    status: AssignmentStatus = AssignmentStatus.ASSIGNED
    grade: str = ""
    note: str = ""
    file_url: str = ""
    file_name: str = ""
    updated_at: Optional[str] = None

    def content(self) -> tuple:
        """Everything but the timestamp; used to detect real changes."""
        return (
            self.attendee_id,
            self.attendee_name,
            self.email,
            self.status,
            self.grade,
            self.note,
            self.file_url,
            self.file_name,
        )


@dataclass(frozen=True)
class Assignment:
    assignment_id: str
    title: str
    due_date: str
    description: str = ""
    resource_url: str = ""
    created_at: Optional[str] = None
    status_map: dict[str, StatusEntry] = field(default_factory=dict)
