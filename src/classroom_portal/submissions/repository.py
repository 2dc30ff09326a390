from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

from .model import Submission


class SubmissionRepository(Protocol):
    def get(self, submission_id: str) -> Optional[Submission]:
        raise NotImplementedError

    def list_for_assignment(self, assignment_id: str) -> Sequence[Submission]:
        raise NotImplementedError

    def record_submission(
        self,
        *,
        assignment_id: str,
        student_id: str,
        student_email: str,
        notes: str,
        submitted_at: str,
    ) -> str:
        """Upsert the submission and flag the student's assignment entry ``Submitted``, atomically."""

        raise NotImplementedError

    def record_grade(self, submission: Submission, *, grade: str, feedback: str, graded_at: str) -> None:
        """Grade the submission and mirror grade/status into the assignment entry, atomically."""

        raise NotImplementedError

    def watch_assignment(
        self, assignment_id: str, callback: Callable[[list[Submission]], None]
    ) -> Callable[[], None]:
        raise NotImplementedError
