from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import timestamp
from ..core.exceptions import NotFoundError
from .model import Submission
from .repository import SubmissionRepository

logger = logging.getLogger(__name__)


class SubmissionReview:
    """Use case: teacher reviews and grades student submissions."""

    def __init__(self, submissions: SubmissionRepository):
        self._submissions = submissions

    def get(self, submission_id: str) -> Optional[Submission]:
        return self._submissions.get(submission_id)

    def list_for_assignment(self, assignment_id: str) -> Sequence[Submission]:
        items = list(self._submissions.list_for_assignment(assignment_id))
        items.sort(key=lambda s: s.submitted_at or "", reverse=True)
        return items

    def watch_assignment(
        self, assignment_id: str, callback: Callable[[list[Submission]], None]
    ) -> Callable[[], None]:
        """Live feed of an assignment's submissions; returns the unsubscribe callable."""
        return self._submissions.watch_assignment(assignment_id, callback)

    def grade(self, submission_id: str, *, grade: str, feedback: str = "") -> Submission:
        """Grade a submission.

        The grade (not the feedback) and status ``Graded`` are mirrored into
        the assignment's entry for the student in the same atomic batch.
        """
        submission = self._submissions.get(submission_id)
        if not submission:
            raise NotFoundError("Submission not found")

        grade = (grade or "").strip()
        feedback = feedback or ""
        self._submissions.record_grade(submission, grade=grade, feedback=feedback, graded_at=timestamp())
        logger.info("submission %s graded", submission_id)
        return self._submissions.get(submission_id) or submission
