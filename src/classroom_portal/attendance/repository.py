from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceDay


class AttendanceRepository(Protocol):
    def get_day(self, date: str) -> Optional[AttendanceDay]:
        raise NotImplementedError

    def save_day(self, day: AttendanceDay) -> None:
        """Write the whole day document (records and summary in one write)."""

        raise NotImplementedError

    def list_days(self, *, start: Optional[str] = None, end: Optional[str] = None) -> Sequence[AttendanceDay]:
        raise NotImplementedError

    def latest_day(self) -> Optional[AttendanceDay]:
        raise NotImplementedError
