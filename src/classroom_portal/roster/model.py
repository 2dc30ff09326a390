from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Attendee:
    """Domain entity: an active roster entry (a learner).

    Note: Plain data object (no store access).
    """

    attendee_id: str
    name: str
    email: str
    created_at: Optional[str] = None
    restored_at: Optional[str] = None


@dataclass(frozen=True)
class ArchivedAttendee:
    """Soft-deleted roster entry; keeps ``original_id`` so restore reuses the identity."""

    archive_id: str
    original_id: str
    name: str
    email: str
    deleted_at: str
    created_at: Optional[str] = None
