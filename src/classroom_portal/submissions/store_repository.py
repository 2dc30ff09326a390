from __future__ import annotations

from typing import Callable, Optional, Sequence

from ..core import constants
from ..core.enums import AssignmentStatus, SubmissionStatus
from ..database.store import DocumentStore, Filter
from .model import Submission, submission_id_for
from .repository import SubmissionRepository


def _to_submission(doc_id: str, data: dict) -> Submission:
    return Submission(
        submission_id=doc_id,
        assignment_id=data.get("assignment_id", ""),
        student_id=data.get("student_id", ""),
        status=SubmissionStatus(data.get("status", SubmissionStatus.SUBMITTED.value)),
        student_email=data.get("student_email") or "",
        notes=data.get("notes") or "",
        grade=data.get("grade") or "",
        feedback=data.get("feedback") or "",
        file_url=data.get("file_url") or "",
        file_name=data.get("file_name") or "",
        submitted_at=data.get("submitted_at"),
        graded_at=data.get("graded_at"),
    )


class StoreSubmissionRepository(SubmissionRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get(self, submission_id: str) -> Optional[Submission]:
        data = self._store.get(constants.SUBMISSIONS, submission_id)
        return _to_submission(submission_id, data) if data is not None else None

    def list_for_assignment(self, assignment_id: str) -> Sequence[Submission]:
        docs = self._store.query(constants.SUBMISSIONS, [Filter("assignment_id", "==", assignment_id)])
        return [_to_submission(d.id, d.data) for d in docs]

    def record_submission(
        self,
        *,
        assignment_id: str,
        student_id: str,
        student_email: str,
        notes: str,
        submitted_at: str,
    ) -> str:
        submission_id = submission_id_for(assignment_id, student_id)
        entry = f"status_map.{student_id}"

        batch = self._store.batch()
        batch.set(
            constants.SUBMISSIONS,
            submission_id,
            {
                "assignment_id": assignment_id,
                "student_id": student_id,
                "student_email": student_email,
                "notes": notes,
                "submitted_at": submitted_at,
                "status": SubmissionStatus.SUBMITTED.value,
            },
            merge=True,
        )
        batch.update(
            constants.ASSIGNMENTS,
            assignment_id,
            {
                f"{entry}.status": AssignmentStatus.SUBMITTED.value,
                f"{entry}.note": notes,
                f"{entry}.file_url": "",
                f"{entry}.file_name": "",
                f"{entry}.updated_at": submitted_at,
            },
        )
        batch.commit()
        return submission_id

    def record_grade(self, submission: Submission, *, grade: str, feedback: str, graded_at: str) -> None:
        entry = f"status_map.{submission.student_id}"

        batch = self._store.batch()
        batch.update(
            constants.SUBMISSIONS,
            submission.submission_id,
            {
                "grade": grade,
                "feedback": feedback,
                "status": SubmissionStatus.GRADED.value,
                "graded_at": graded_at,
            },
        )
        batch.update(
            constants.ASSIGNMENTS,
            submission.assignment_id,
            {
                f"{entry}.status": AssignmentStatus.GRADED.value,
                f"{entry}.grade": grade,
                f"{entry}.updated_at": graded_at,
            },
        )
        batch.commit()

    def watch_assignment(
        self, assignment_id: str, callback: Callable[[list[Submission]], None]
    ) -> Callable[[], None]:
        def _on_snapshot(docs) -> None:
            callback([_to_submission(d.id, d.data) for d in docs])

        return self._store.subscribe(
            constants.SUBMISSIONS,
            _on_snapshot,
            [Filter("assignment_id", "==", assignment_id)],
        )
