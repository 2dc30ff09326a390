from __future__ import annotations

import pytest

from classroom_portal.core.exceptions import DuplicateEmailError, NotFoundError, ValidationError
from classroom_portal.database.memory_store import InMemoryDocumentStore
from classroom_portal.roster.service import RosterService
from classroom_portal.roster.store_repository import StoreAttendeeRepository


def _service(**kwargs) -> RosterService:
    return RosterService(StoreAttendeeRepository(InMemoryDocumentStore()), **kwargs)


def test_archived_email_blocks_reuse_until_restored():
    roster = _service()
    a = roster.add(name="Ann", email="a@x.com")

    with pytest.raises(DuplicateEmailError):
        roster.add(name="Bob", email="a@x.com")

    roster.soft_delete(a.attendee_id)
    assert roster.count_active() == 0

    with pytest.raises(DuplicateEmailError):
        roster.add(name="Cid", email="a@x.com")

    restored = roster.restore(a.attendee_id)

    assert restored.attendee_id == a.attendee_id
    assert restored.created_at == a.created_at
    assert restored.restored_at is not None
    assert [x.attendee_id for x in roster.list_active()] == [a.attendee_id]
    assert roster.list_archived() == []


def test_soft_delete_keeps_original_id_in_archive():
    roster = _service()
    a = roster.add(name="Ann", email="a@x.com")

    archived = roster.soft_delete(a.attendee_id)

    assert archived.original_id == a.attendee_id
    assert roster.get(a.attendee_id) is None
    listed = roster.list_archived()
    assert [(x.original_id, x.email) for x in listed] == [(a.attendee_id, "a@x.com")]


def test_restore_fails_when_active_attendee_holds_email():
    store = InMemoryDocumentStore()
    repo = StoreAttendeeRepository(store)
    roster = RosterService(repo)
    a = roster.add(name="Ann", email="a@x.com")
    roster.soft_delete(a.attendee_id)
    # an active entry with the same e-mail written behind the roster's back
    store.set("attendees", "other", {"name": "Other", "email": "a@x.com"})

    with pytest.raises(DuplicateEmailError):
        roster.restore(a.attendee_id)

    assert roster.get(a.attendee_id) is None
    assert len(roster.list_archived()) == 1


def test_restore_unknown_archive_entry():
    with pytest.raises(NotFoundError):
        _service().restore("nope")


def test_edit_allows_own_email_and_rejects_others():
    roster = _service()
    a = roster.add(name="Ann", email="a@x.com")
    b = roster.add(name="Bob", email="b@x.com")

    edited = roster.edit(a.attendee_id, name="Ann Lee", email="a@x.com")
    assert edited.name == "Ann Lee"

    with pytest.raises(DuplicateEmailError):
        roster.edit(a.attendee_id, name="Ann", email="b@x.com")

    roster.soft_delete(b.attendee_id)
    with pytest.raises(DuplicateEmailError):
        roster.edit(a.attendee_id, name="Ann", email="b@x.com")


def test_edit_missing_attendee():
    with pytest.raises(NotFoundError):
        _service().edit("nope", name="X", email="x@x.com")


def test_email_match_is_case_sensitive_by_default():
    roster = _service()
    roster.add(name="Ann", email="a@x.com")

    other = roster.add(name="Ann 2", email="A@x.com")

    assert other.email == "A@x.com"
    assert roster.count_active() == 2


def test_case_insensitive_option():
    roster = _service(case_sensitive_emails=False)
    a = roster.add(name="Ann", email="a@x.com")

    with pytest.raises(DuplicateEmailError):
        roster.add(name="Ann 2", email="A@X.com")
    assert roster.find_by_email("A@x.COM").attendee_id == a.attendee_id


def test_add_validates_input():
    roster = _service()
    with pytest.raises(ValidationError):
        roster.add(name="  ", email="a@x.com")
    with pytest.raises(ValidationError):
        roster.add(name="Ann", email="not-an-email")


def test_list_active_sorted_by_name():
    roster = _service()
    roster.add(name="Cid", email="c@x.com")
    roster.add(name="Ann", email="a@x.com")
    roster.add(name="Bob", email="b@x.com")

    assert [a.name for a in roster.list_active()] == ["Ann", "Bob", "Cid"]
    assert [a.name for a in roster.list_active(descending=True)] == ["Cid", "Bob", "Ann"]
