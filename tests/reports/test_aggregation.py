from __future__ import annotations

import pytest

from classroom_portal.attendance.model import AttendanceRecord
from classroom_portal.attendance.service import AttendanceLedger
from classroom_portal.attendance.store_repository import StoreAttendanceRepository
from classroom_portal.core.enums import AttendanceStatus
from classroom_portal.core.exceptions import ValidationError
from classroom_portal.database.memory_store import InMemoryDocumentStore
from classroom_portal.reports.aggregation import (
    attendance_percentage,
    group_by_month,
    summarize_attendees,
    tally,
)
from classroom_portal.reports.service import ReportService
from classroom_portal.roster.model import Attendee
from classroom_portal.roster.service import RosterService
from classroom_portal.roster.store_repository import StoreAttendeeRepository


def _record(attendee_id: str, date: str, status: AttendanceStatus) -> AttendanceRecord:
    return AttendanceRecord(attendee_id=attendee_id, attendee_name=attendee_id, email="", date=date, status=status)


@pytest.mark.parametrize(
    "present,absent,leave,expected",
    [
        (3, 1, 0, 75),
        (0, 0, 0, 0),
        (2, 1, 0, 67),
        (1, 7, 0, 13),
        (1, 1, 1, 33),
        (4, 0, 0, 100),
    ],
)
def test_attendance_percentage(present, absent, leave, expected):
    assert attendance_percentage(present, absent, leave) == expected


def test_group_by_month_buckets_by_date_prefix():
    records = [
        _record("s1", "2026-01-31", AttendanceStatus.PRESENT),
        _record("s1", "2026-02-01", AttendanceStatus.ABSENT),
        _record("s2", "2026-02-14", AttendanceStatus.LEAVE),
    ]

    buckets = group_by_month(records)

    assert sorted(buckets) == ["2026-01", "2026-02"]
    assert [r.date for r in buckets["2026-02"]] == ["2026-02-01", "2026-02-14"]


def test_tally_and_summaries_include_attendees_without_records():
    records = [
        _record("s1", "2026-03-01", AttendanceStatus.PRESENT),
        _record("s1", "2026-03-02", AttendanceStatus.PRESENT),
        _record("s1", "2026-03-03", AttendanceStatus.PRESENT),
        _record("s1", "2026-03-04", AttendanceStatus.ABSENT),
    ]
    roster = [Attendee("s1", "Ann", "a@x.com"), Attendee("s2", "Bob", "b@x.com")]

    t = tally(records)
    rows = summarize_attendees(roster, records)

    assert (t.present, t.absent, t.leave, t.total, t.percentage) == (3, 1, 0, 4, 75)
    assert rows[0].as_row()["attendance_percentage"] == 75
    assert rows[1].as_row() == {
        "student_id": "s2",
        "student_name": "Bob",
        "email": "b@x.com",
        "present": 0,
        "absent": 0,
        "leave": 0,
        "total": 0,
        "attendance_percentage": 0,
    }


def _report_setup():
    store = InMemoryDocumentStore()
    attendees = StoreAttendeeRepository(store)
    roster = RosterService(attendees)
    ledger = AttendanceLedger(StoreAttendanceRepository(store), attendees)
    return roster, ledger, ReportService(ledger, attendees)


def test_monthly_summary_only_counts_days_in_month():
    roster, ledger, reports = _report_setup()
    a = roster.add(name="Ann", email="a@x.com")
    ledger.save_day("2026-02-28", {a.attendee_id: {"status": "Absent"}})
    ledger.save_day("2026-03-01", {a.attendee_id: {"status": "Present"}})
    ledger.save_day("2026-03-31", {a.attendee_id: {"status": "Leave"}})

    report = reports.monthly_summary(2026, 3)

    assert report.period == "2026-03"
    row = report.rows[0]
    assert (row.present, row.absent, row.leave, row.percentage) == (1, 0, 1, 50)
    assert reports.student_month_summary(a.attendee_id, 2026, 2).absent == 1
    assert reports.day_overview("2026-03-01").present == 1

    with pytest.raises(ValidationError):
        reports.monthly_summary(2026, 13)


def test_daily_summary_of_unsaved_day_is_all_zero():
    roster, _, reports = _report_setup()
    roster.add(name="Ann", email="a@x.com")

    report = reports.daily_summary("2026-03-05")

    assert report.overall.total == 0
    assert [r.total for r in report.rows] == [0]
