from __future__ import annotations

import pytest

from classroom_portal.assignments import service as assignment_service
from classroom_portal.assignments.service import AssignmentTracker
from classroom_portal.assignments.store_repository import StoreAssignmentRepository
from classroom_portal.core.enums import AssignmentStatus, SubmissionStatus
from classroom_portal.core.exceptions import NotFoundError
from classroom_portal.database.memory_store import InMemoryDocumentStore
from classroom_portal.roster.service import RosterService
from classroom_portal.roster.store_repository import StoreAttendeeRepository
from classroom_portal.submissions.service import SubmissionReview
from classroom_portal.submissions.store_repository import StoreSubmissionRepository


def _setup():
    store = InMemoryDocumentStore()
    attendees = StoreAttendeeRepository(store)
    submissions = StoreSubmissionRepository(store)
    roster = RosterService(attendees)
    tracker = AssignmentTracker(StoreAssignmentRepository(store), attendees, submissions)
    return store, roster, tracker, SubmissionReview(submissions)


def test_grade_mirrors_grade_into_status_map():
    _, roster, tracker, review = _setup()
    a = roster.add(name="Ann", email="a@x.com")
    assignment = tracker.create(title="Essay", due_date="2026-04-01")
    submission = tracker.student_submit(assignment.assignment_id, a.attendee_id, note="done")

    graded = review.grade(submission.submission_id, grade=" A- ", feedback="Nice structure")

    assert graded.status == SubmissionStatus.GRADED
    assert (graded.grade, graded.feedback) == ("A-", "Nice structure")
    assert graded.graded_at is not None
    entry = tracker.require(assignment.assignment_id).status_map[a.attendee_id]
    assert (entry.status, entry.grade) == (AssignmentStatus.GRADED, "A-")
    # feedback stays on the submission only
    assert entry.note == "done"


def test_grade_unknown_submission():
    _, _, _, review = _setup()
    with pytest.raises(NotFoundError):
        review.grade("nope", grade="A")


def test_grade_is_atomic_when_assignment_is_gone():
    store, roster, tracker, review = _setup()
    a = roster.add(name="Ann", email="a@x.com")
    assignment = tracker.create(title="Essay", due_date="2026-04-01")
    submission = tracker.student_submit(assignment.assignment_id, a.attendee_id)
    tracker.delete(assignment.assignment_id)

    with pytest.raises(NotFoundError):
        review.grade(submission.submission_id, grade="A")

    assert review.get(submission.submission_id).status == SubmissionStatus.SUBMITTED


def test_list_for_assignment_newest_first(monkeypatch):
    _, roster, tracker, review = _setup()
    a = roster.add(name="Ann", email="a@x.com")
    b = roster.add(name="Bob", email="b@x.com")
    assignment = tracker.create(title="Essay", due_date="2026-04-01")
    monkeypatch.setattr(assignment_service, "timestamp", lambda: "2026-04-01T08:00:00")
    tracker.student_submit(assignment.assignment_id, a.attendee_id)
    monkeypatch.setattr(assignment_service, "timestamp", lambda: "2026-04-01T09:00:00")
    tracker.student_submit(assignment.assignment_id, b.attendee_id)

    items = review.list_for_assignment(assignment.assignment_id)

    assert [s.student_id for s in items] == [b.attendee_id, a.attendee_id]


def test_watch_assignment_pushes_updates_until_unsubscribed():
    _, roster, tracker, review = _setup()
    a = roster.add(name="Ann", email="a@x.com")
    b = roster.add(name="Bob", email="b@x.com")
    assignment = tracker.create(title="Essay", due_date="2026-04-01")
    other = tracker.create(title="Quiz", due_date="2026-04-02")

    feed: list[list[tuple[str, str]]] = []
    unsubscribe = review.watch_assignment(
        assignment.assignment_id,
        lambda items: feed.append(sorted((s.student_id, s.status.value) for s in items)),
    )

    submission = tracker.student_submit(assignment.assignment_id, a.attendee_id)
    tracker.student_submit(other.assignment_id, a.attendee_id)
    review.grade(submission.submission_id, grade="A")
    unsubscribe()
    tracker.student_submit(assignment.assignment_id, b.attendee_id)

    assert feed[0] == []
    assert feed[1] == [(a.attendee_id, "submitted")]
    assert feed[-1] == [(a.attendee_id, "graded")]
    assert all(b.attendee_id not in {sid for sid, _ in snapshot} for snapshot in feed)
