from __future__ import annotations

from dataclasses import dataclass

from ..attendance.model import DaySummary
from ..attendance.service import AttendanceLedger
from ..common.datetime_utils import format_date, month_bounds
from ..core.exceptions import ValidationError
from ..roster.repository import AttendeeRepository
from .aggregation import AttendeeSummary, StatusTally, summarize_attendees, tally


@dataclass(frozen=True)
class ReportData:
    period: str
    rows: list[AttendeeSummary]
    overall: StatusTally


class ReportService:
    """Daily/monthly attendance summaries for the teacher and student views."""

    def __init__(self, ledger: AttendanceLedger, attendees: AttendeeRepository):
        self._ledger = ledger
        self._attendees = attendees

    def _build(self, period: str, records) -> ReportData:
        records = list(records)
        rows = summarize_attendees(self._attendees.list_active(), records)
        return ReportData(period=period, rows=rows, overall=tally(records))

    def daily_summary(self, date: str) -> ReportData:
        day = self._ledger.load_day(date)
        return self._build(day.date, day.records.values())

    def monthly_summary(self, year: int, month: int) -> ReportData:
        start, end = self._month(year, month)
        days = self._ledger.days_between(format_date(start), format_date(end))
        records = [r for day in days for r in day.records.values()]
        return self._build(f"{int(year):04d}-{int(month):02d}", records)

    def student_month_summary(self, attendee_id: str, year: int, month: int) -> StatusTally:
        start, end = self._month(year, month)
        lo, hi = format_date(start), format_date(end)
        return tally(r for r in self._ledger.history_for_student(attendee_id) if lo <= r.date <= hi)

    def day_overview(self, date: str) -> DaySummary:
        """The stored summary of a day (zeros when nothing was saved)."""
        return self._ledger.load_day(date).summary

    @staticmethod
    def _month(year: int, month: int):
        try:
            return month_bounds(int(year), int(month))
        except (TypeError, ValueError):
            raise ValidationError("Invalid month") from None
