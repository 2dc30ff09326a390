from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence, Union

from ..common.datetime_utils import timestamp
from ..common.validators import require_date_key
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..roster.repository import AttendeeRepository
from .model import AttendanceDay, AttendanceEdit, AttendanceRecord, DaySummary
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

EditInput = Union[AttendanceEdit, Mapping[str, object]]


def _coerce_status(value) -> Optional[AttendanceStatus]:
    if value is None or value == "":
        return None
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown attendance status: {value!r}") from None


def _coerce_edit(value: EditInput) -> AttendanceEdit:
    if isinstance(value, AttendanceEdit):
        return value
    if not isinstance(value, Mapping):
        raise ValidationError("Each edit must be an object with a status and a note")
    return AttendanceEdit(status=_coerce_status(value.get("status")), note=str(value.get("note") or ""))


class AttendanceLedger:
    """Use case: mark and read daily attendance.

    One document per calendar day holds every record of that day and a
    summary. The summary is always recomputed from the merged record set and
    written in the same write as the records it describes.
    """

    def __init__(self, days: AttendanceRepository, attendees: AttendeeRepository):
        self._days = days
        self._attendees = attendees

    def load_day(self, date: str) -> AttendanceDay:
        date = require_date_key(date)
        return self._days.get_day(date) or AttendanceDay.empty(date)

    def save_day(self, date: str, edits: Mapping[str, EditInput]) -> AttendanceDay:
        """Merge ``edits`` into the day and rewrite it with a fresh summary.

        Records not mentioned in ``edits`` are kept; edits without a status
        are skipped.
        """
        date = require_date_key(date)
        marked = {k: e for k, e in ((k, _coerce_edit(v)) for k, v in edits.items()) if e.status is not None}

        roster = {a.attendee_id: a for a in self._attendees.list_active()}
        unknown = sorted(k for k in marked if k not in roster)
        if unknown:
            raise ValidationError(f"Unknown attendee(s): {', '.join(unknown)}")

        existing = self._days.get_day(date)
        records = dict(existing.records) if existing else {}

        now = timestamp()
        for attendee_id, edit in marked.items():
            attendee = roster[attendee_id]
            records[attendee_id] = AttendanceRecord(
                attendee_id=attendee_id,
                attendee_name=attendee.name,
                email=attendee.email,
                date=date,
                status=edit.status,
                note=edit.note,
                updated_at=now,
            )

        day = AttendanceDay(date=date, records=records, summary=DaySummary.from_records(records.values()))
        self._days.save_day(day)
        logger.info("attendance %s saved (%d marked, %d total)", date, len(marked), day.summary.total)
        return day

    def mark_all(self, date: str, status: AttendanceStatus, *, note: str = "") -> AttendanceDay:
        status = _coerce_status(status)
        if status is None:
            raise ValidationError("Status is required")
        edits = {a.attendee_id: AttendanceEdit(status=status, note=note) for a in self._attendees.list_active()}
        return self.save_day(date, edits)

    def days_between(self, start: str, end: str) -> Sequence[AttendanceDay]:
        start = require_date_key(start, "Start date")
        end = require_date_key(end, "End date")
        if start > end:
            raise ValidationError("Start date must not be after end date")
        return self._days.list_days(start=start, end=end)

    def history_for_student(self, attendee_id: str) -> list[AttendanceRecord]:
        """All records of one attendee, newest first."""
        out = [day.records[attendee_id] for day in self._days.list_days() if attendee_id in day.records]
        out.sort(key=lambda r: r.date, reverse=True)
        return out

    def latest_for_student(self, attendee_id: str) -> Optional[AttendanceRecord]:
        """The attendee's record on the most recent day that has a ledger document."""
        day = self._days.latest_day()
        if not day:
            return None
        return day.records.get(attendee_id)
