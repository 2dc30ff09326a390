from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for route permissions."""

    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Per-day attendance status stored in the ledger."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"


class AssignmentStatus(str, Enum):
    """Per-student progress on an assignment."""

    ASSIGNED = "Assigned"
    SUBMITTED = "Submitted"
    GRADED = "Graded"


class SubmissionStatus(str, Enum):
    SUBMITTED = "submitted"
    GRADED = "graded"
