from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import SubmissionStatus


def submission_id_for(assignment_id: str, student_id: str) -> str:
    """One submission per (assignment, student): the id is derived, not generated."""
    return f"{assignment_id}_{student_id}"


@dataclass(frozen=True)
class Submission:
    submission_id: str
    assignment_id: str
    student_id: str
    status: SubmissionStatus
    student_email: str = ""
    notes: str = ""
    grade: str = ""
    feedback: str = ""
    file_url: str = ""
    file_name: str = ""
    submitted_at: Optional[str] = None
    graded_at: Optional[str] = None
