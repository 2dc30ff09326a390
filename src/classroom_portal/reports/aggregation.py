"""Pure aggregation helpers over already-fetched ledger records and status maps."""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Sequence

from ..assignments.model import Assignment
from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import month_key
from ..core.enums import AssignmentStatus, AttendanceStatus
from ..roster.model import Attendee


@dataclass(frozen=True)
class StatusTally:
    present: int = 0
    absent: int = 0
    leave: int = 0

    @property
    def total(self) -> int:
        return self.present + self.absent + self.leave

    @property
    def percentage(self) -> int:
        return attendance_percentage(self.present, self.absent, self.leave)


@dataclass(frozen=True)
class AttendeeSummary:
    attendee_id: str
    name: str
    email: str
    present: int
    absent: int
    leave: int
    total: int
    percentage: int

    def as_row(self) -> dict:
        return {
            "student_id": self.attendee_id,
            "student_name": self.name,
            "email": self.email,
            "present": self.present,
            "absent": self.absent,
            "leave": self.leave,
            "total": self.total,
            "attendance_percentage": self.percentage,
        }


def attendance_percentage(present: int, absent: int, leave: int) -> int:
    """Share of Present over all marked days, rounded half-up; 0 when nothing is marked."""
    denominator = present + absent + leave
    if denominator <= 0:
        return 0
    return int(math.floor(present / denominator * 100 + 0.5))


def tally(records: Iterable[AttendanceRecord]) -> StatusTally:
    present = absent = leave = 0
    for r in records:
        if r.status == AttendanceStatus.PRESENT:
            present += 1
        elif r.status == AttendanceStatus.ABSENT:
            absent += 1
        elif r.status == AttendanceStatus.LEAVE:
            leave += 1
    return StatusTally(present=present, absent=absent, leave=leave)


def group_by_month(records: Iterable[AttendanceRecord]) -> dict[str, list[AttendanceRecord]]:
    """Bucket records by the calendar month (YYYY-MM) of their date key."""
    buckets: dict[str, list[AttendanceRecord]] = defaultdict(list)
    for r in records:
        buckets[month_key(r.date)].append(r)
    return dict(buckets)


def group_by_attendee(records: Iterable[AttendanceRecord]) -> dict[str, list[AttendanceRecord]]:
    buckets: dict[str, list[AttendanceRecord]] = defaultdict(list)
    for r in records:
        buckets[r.attendee_id].append(r)
    return dict(buckets)


def summarize_attendees(attendees: Sequence[Attendee], records: Iterable[AttendanceRecord]) -> list[AttendeeSummary]:
    """One row per roster attendee, zeros for attendees without records."""
    by_attendee = group_by_attendee(records)
    out = []
    for a in attendees:
        t = tally(by_attendee.get(a.attendee_id, []))
        out.append(
            AttendeeSummary(
                attendee_id=a.attendee_id,
                name=a.name,
                email=a.email,
                present=t.present,
                absent=t.absent,
                leave=t.leave,
                total=t.total,
                percentage=t.percentage,
            )
        )
    return out


def assignment_status_counts(assignment: Assignment) -> dict[str, int]:
    values = list(assignment.status_map.values())
    return {
        "total": len(values),
        "assigned": sum(1 for v in values if v.status == AssignmentStatus.ASSIGNED),
        "submitted": sum(1 for v in values if v.status == AssignmentStatus.SUBMITTED),
        "graded": sum(1 for v in values if v.status == AssignmentStatus.GRADED),
    }
