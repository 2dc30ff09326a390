from __future__ import annotations

import pytest

from classroom_portal.attendance.model import AttendanceEdit
from classroom_portal.attendance.service import AttendanceLedger
from classroom_portal.attendance.store_repository import StoreAttendanceRepository
from classroom_portal.core.enums import AttendanceStatus
from classroom_portal.core.exceptions import ValidationError
from classroom_portal.database.memory_store import InMemoryDocumentStore
from classroom_portal.roster.service import RosterService
from classroom_portal.roster.store_repository import StoreAttendeeRepository


def _setup():
    store = InMemoryDocumentStore()
    attendees = StoreAttendeeRepository(store)
    roster = RosterService(attendees)
    ledger = AttendanceLedger(StoreAttendanceRepository(store), attendees)
    return roster, ledger


def test_summary_always_matches_records():
    roster, ledger = _setup()
    a = roster.add(name="Ann", email="a@x.com")
    b = roster.add(name="Bob", email="b@x.com")
    c = roster.add(name="Cid", email="c@x.com")

    day = ledger.save_day(
        "2026-03-02",
        {
            a.attendee_id: {"status": "Present"},
            b.attendee_id: {"status": "Absent", "note": "sick"},
            c.attendee_id: AttendanceEdit(status=AttendanceStatus.LEAVE),
        },
    )

    s = day.summary
    assert (s.present, s.absent, s.leave, s.total) == (1, 1, 1, 3)
    assert s.present + s.absent + s.leave == s.total
    assert ledger.load_day("2026-03-02").records[b.attendee_id].note == "sick"


def test_save_merges_into_existing_day():
    roster, ledger = _setup()
    a = roster.add(name="Ann", email="a@x.com")
    b = roster.add(name="Bob", email="b@x.com")

    ledger.save_day("2026-03-02", {a.attendee_id: {"status": "Present"}})
    day = ledger.save_day("2026-03-02", {b.attendee_id: {"status": "Absent"}})

    assert set(day.records) == {a.attendee_id, b.attendee_id}
    assert day.records[a.attendee_id].status == AttendanceStatus.PRESENT
    assert (day.summary.present, day.summary.absent, day.summary.total) == (1, 1, 2)


def test_unmarked_edits_are_skipped():
    roster, ledger = _setup()
    a = roster.add(name="Ann", email="a@x.com")
    b = roster.add(name="Bob", email="b@x.com")

    day = ledger.save_day("2026-03-02", {a.attendee_id: {"status": "Present"}, b.attendee_id: AttendanceEdit()})

    assert list(day.records) == [a.attendee_id]
    assert day.summary.total == 1


def test_resaving_same_edits_is_stable():
    roster, ledger = _setup()
    a = roster.add(name="Ann", email="a@x.com")
    edits = {a.attendee_id: {"status": "Leave"}}

    first = ledger.save_day("2026-03-02", edits)
    second = ledger.save_day("2026-03-02", edits)

    assert first.summary == second.summary
    assert set(first.records) == set(second.records)


def test_unknown_attendee_rejected_and_nothing_written():
    roster, ledger = _setup()
    a = roster.add(name="Ann", email="a@x.com")

    with pytest.raises(ValidationError):
        ledger.save_day("2026-03-02", {a.attendee_id: {"status": "Present"}, "ghost": {"status": "Absent"}})

    assert ledger.load_day("2026-03-02").records == {}


def test_unknown_status_and_bad_date_rejected():
    roster, ledger = _setup()
    a = roster.add(name="Ann", email="a@x.com")

    with pytest.raises(ValidationError):
        ledger.save_day("2026-03-02", {a.attendee_id: {"status": "Late"}})
    with pytest.raises(ValidationError):
        ledger.load_day("02/03/2026")


def test_date_keys_must_be_zero_padded():
    roster, ledger = _setup()
    a = roster.add(name="Ann", email="a@x.com")
    ledger.save_day("2026-03-05", {a.attendee_id: {"status": "Present"}})

    with pytest.raises(ValidationError):
        ledger.save_day("2026-3-5", {a.attendee_id: {"status": "Absent"}})
    with pytest.raises(ValidationError):
        ledger.days_between("2026-3-1", "2026-03-31")

    assert [r.date for r in ledger.history_for_student(a.attendee_id)] == ["2026-03-05"]


def test_edit_that_is_not_an_object_is_rejected():
    roster, ledger = _setup()
    a = roster.add(name="Ann", email="a@x.com")

    with pytest.raises(ValidationError):
        ledger.save_day("2026-03-05", {a.attendee_id: "Present"})

    assert ledger.load_day("2026-03-05").records == {}


def test_empty_day_loads_with_zero_summary():
    _, ledger = _setup()

    day = ledger.load_day("2026-03-02")

    assert day.records == {}
    assert day.summary.total == 0


def test_mark_all_covers_active_roster():
    roster, ledger = _setup()
    roster.add(name="Ann", email="a@x.com")
    roster.add(name="Bob", email="b@x.com")

    day = ledger.mark_all("2026-03-02", AttendanceStatus.PRESENT)

    assert day.summary.present == 2
    assert day.summary.total == 2


def test_records_keep_snapshot_after_archive():
    roster, ledger = _setup()
    a = roster.add(name="Ann", email="a@x.com")
    ledger.save_day("2026-03-02", {a.attendee_id: {"status": "Present"}})

    roster.soft_delete(a.attendee_id)

    record = ledger.load_day("2026-03-02").records[a.attendee_id]
    assert (record.attendee_name, record.email) == ("Ann", "a@x.com")


def test_history_newest_first_and_latest():
    roster, ledger = _setup()
    a = roster.add(name="Ann", email="a@x.com")
    b = roster.add(name="Bob", email="b@x.com")
    ledger.save_day("2026-03-01", {a.attendee_id: {"status": "Present"}})
    ledger.save_day("2026-03-03", {a.attendee_id: {"status": "Absent"}})
    ledger.save_day("2026-03-04", {b.attendee_id: {"status": "Present"}})

    history = ledger.history_for_student(a.attendee_id)

    assert [r.date for r in history] == ["2026-03-03", "2026-03-01"]
    assert ledger.latest_for_student(b.attendee_id).status == AttendanceStatus.PRESENT
    # latest day has no record for Ann
    assert ledger.latest_for_student(a.attendee_id) is None


def test_days_between_is_inclusive_and_validated():
    roster, ledger = _setup()
    a = roster.add(name="Ann", email="a@x.com")
    for d in ("2026-02-28", "2026-03-01", "2026-03-31", "2026-04-01"):
        ledger.save_day(d, {a.attendee_id: {"status": "Present"}})

    days = ledger.days_between("2026-03-01", "2026-03-31")

    assert [d.date for d in days] == ["2026-03-01", "2026-03-31"]
    with pytest.raises(ValidationError):
        ledger.days_between("2026-04-01", "2026-03-01")
