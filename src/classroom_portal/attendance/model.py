from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendee's status on one day.

    Name and e-mail are captured when the record is written, so history
    still renders after the attendee is archived or renamed.
    """

    attendee_id: str
    attendee_name: str
    email: str
    date: str
    status: AttendanceStatus
    note: str = ""
    updated_at: Optional[str] = None

    @property
    def record_id(self) -> str:
        return f"{self.date}_{self.attendee_id}"


@dataclass(frozen=True)
class DaySummary:
    present: int = 0
    absent: int = 0
    leave: int = 0
    total: int = 0

    @classmethod
    def from_records(cls, records: Iterable[AttendanceRecord]) -> "DaySummary":
        present = absent = leave = total = 0
        for r in records:
            total += 1
            if r.status == AttendanceStatus.PRESENT:
                present += 1
            elif r.status == AttendanceStatus.ABSENT:
                absent += 1
            elif r.status == AttendanceStatus.LEAVE:
                leave += 1
        return cls(present=present, absent=absent, leave=leave, total=total)


@dataclass(frozen=True)
class AttendanceDay:
    """The per-day ledger document: every record of the day plus its summary."""

    date: str
    records: dict[str, AttendanceRecord] = field(default_factory=dict)
    summary: DaySummary = field(default_factory=DaySummary)

    @classmethod
    def empty(cls, date: str) -> "AttendanceDay":
        return cls(date=date)


@dataclass(frozen=True)
class AttendanceEdit:
    """Teacher input for one attendee; ``status=None`` means "not marked" and is never saved."""

    status: Optional[AttendanceStatus] = None
    note: str = ""
