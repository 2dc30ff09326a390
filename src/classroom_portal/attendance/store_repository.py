from __future__ import annotations

from typing import Optional, Sequence

from ..core import constants
from ..core.enums import AttendanceStatus
from ..database.store import DocumentStore, Filter
from .model import AttendanceDay, AttendanceRecord, DaySummary
from .repository import AttendanceRepository


def _record_to_doc(r: AttendanceRecord) -> dict:
    return {
        "id": r.record_id,
        "attendee_id": r.attendee_id,
        "attendee_name": r.attendee_name,
        "email": r.email,
        "date": r.date,
        "status": r.status.value,
        "note": r.note,
        "updated_at": r.updated_at,
    }


def _to_day(doc_id: str, data: dict) -> AttendanceDay:
    date = data.get("date") or doc_id
    records = {}
    for attendee_id, raw in (data.get("records") or {}).items():
        records[attendee_id] = AttendanceRecord(
            attendee_id=raw.get("attendee_id", attendee_id),
            attendee_name=raw.get("attendee_name", ""),
            email=raw.get("email", ""),
            date=raw.get("date", date),
            status=AttendanceStatus(raw["status"]),
            note=raw.get("note") or "",
            updated_at=raw.get("updated_at"),
        )
    s = data.get("summary") or {}
    summary = DaySummary(
        present=int(s.get("present", 0)),
        absent=int(s.get("absent", 0)),
        leave=int(s.get("leave", 0)),
        total=int(s.get("total", 0)),
    )
    return AttendanceDay(date=date, records=records, summary=summary)


class StoreAttendanceRepository(AttendanceRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_day(self, date: str) -> Optional[AttendanceDay]:
        data = self._store.get(constants.ATTENDANCE, date)
        return _to_day(date, data) if data is not None else None

    def save_day(self, day: AttendanceDay) -> None:
        self._store.set(
            constants.ATTENDANCE,
            day.date,
            {
                "date": day.date,
                "records": {k: _record_to_doc(r) for k, r in day.records.items()},
                "summary": {
                    "present": day.summary.present,
                    "absent": day.summary.absent,
                    "leave": day.summary.leave,
                    "total": day.summary.total,
                },
            },
        )

    def list_days(self, *, start: Optional[str] = None, end: Optional[str] = None) -> Sequence[AttendanceDay]:
        filters = []
        if start:
            filters.append(Filter("date", ">=", start))
        if end:
            filters.append(Filter("date", "<=", end))
        docs = self._store.query(constants.ATTENDANCE, filters, order_by="date")
        return [_to_day(d.id, d.data) for d in docs]

    def latest_day(self) -> Optional[AttendanceDay]:
        docs = self._store.query(constants.ATTENDANCE, order_by="date", descending=True, limit=1)
        return _to_day(docs[0].id, docs[0].data) if docs else None
